"""
他法令参照抽出のテスト
"""
from legallink.core.dictionary import LawNameDictionary
from legallink.core.models import DictEntry, LawRef
from legallink.core.references import extract_external_references


class TestExtractExternalReferences:

    def test_basic_reference(self):
        refs = extract_external_references("民法第二条の規定を準用する。", LawNameDictionary(), "刑法")
        assert refs == {LawRef(source_law="刑法", law_title="民法", article="第二条")}

    def test_multiple_laws(self):
        refs = extract_external_references("民法第二条、商法第五条", LawNameDictionary(), "刑法")
        assert {(r.law_title, r.article) for r in refs} == {("民法", "第二条"), ("商法", "第五条")}

    def test_duplicates_collapse(self):
        text = "民法第二条及び民法第二条並びに民法第三条"
        refs = extract_external_references(text, LawNameDictionary(), "刑法")
        assert sorted(r.article for r in refs) == ["第三条", "第二条"]

    def test_anaphora_skipped(self):
        """同法第N条は他法令参照として扱わない"""
        assert extract_external_references("同法第三条", LawNameDictionary(), "刑法") == set()

    def test_resolved_through_dictionary(self):
        """略称は辞書で正式名へ寄せる"""
        d = LawNameDictionary({
            "独禁法": DictEntry("私的独占の禁止及び公正取引の確保に関する法律", "322AC0000000054"),
        })
        refs = extract_external_references("独禁法第三条に違反した者", d, "刑法")
        assert [r.law_title for r in refs] == ["私的独占の禁止及び公正取引の確保に関する法律"]

    def test_arabic_numerals(self):
        refs = extract_external_references("民法第2条", LawNameDictionary(), "刑法")
        assert [r.article for r in refs] == ["第2条"]

    def test_no_reference(self):
        assert extract_external_references("第一条 この法律は、", LawNameDictionary(), "刑法") == set()
