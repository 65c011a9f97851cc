"""
law_full_text → プレーンテキスト変換のテスト
"""
import pytest

from legallink.core.fulltext import law_full_text_to_text
from legallink.errors import EmptyLawTextError


def node(tag, *children, **attr):
    return {"tag": tag, "attr": attr, "children": list(children)}


class TestLawFullTextToText:

    def test_block_tags_break_lines(self):
        tree = node(
            "Law",
            node(
                "Article",
                node("ArticleTitle", "第一条"),
                node("Paragraph", node("ParagraphSentence", node("Sentence", "この法律は、テストとする。"))),
            ),
        )
        assert law_full_text_to_text(tree) == "第一条\nこの法律は、テストとする。"

    def test_inline_nodes_concatenated(self):
        tree = node("Paragraph", node("Sentence", "甲", node("Ruby", "乙", node("Rt", "おつ")), "丙"))
        assert law_full_text_to_text(tree) == "甲乙おつ丙"

    def test_tag_and_attr_not_emitted(self):
        tree = node("Law", node("LawNum", "昭和三十四年法律第百二十一号"), Era="Showa", Year="34")
        text = law_full_text_to_text(tree)
        assert text == "昭和三十四年法律第百二十一号"
        assert "Showa" not in text
        assert "LawNum" not in text

    def test_whitespace_collapsed_and_blank_lines_dropped(self):
        tree = node(
            "Law",
            node("Article", "第一条   本文\t\tです"),
            node("Article", "   "),
            node("Article", "第二条"),
        )
        assert law_full_text_to_text(tree) == "第一条 本文 です\n第二条"

    def test_list_root(self):
        assert law_full_text_to_text([node("Article", "第一条"), node("Article", "第二条")]) == "第一条\n第二条"

    def test_empty_raises(self):
        with pytest.raises(EmptyLawTextError):
            law_full_text_to_text(node("Law"))

    def test_non_text_scalars_ignored(self):
        with pytest.raises(EmptyLawTextError):
            law_full_text_to_text({"tag": "Law", "children": [1, None, True]})
