"""
法令名断片の正規化テスト
"""
import pytest

from legallink.core.normalize import (
    normalize_law_ref_title,
    split_connective,
    strip_amendment_qualifier,
    strip_leading_noise,
)
from legallink.utils.patterns import AMBIGUOUS_LAW_LABELS


class TestNormalizeLawRefTitle:
    """normalize_law_ref_title の基本動作"""

    def test_plain_title(self):
        assert normalize_law_ref_title("特許法") == "特許法"

    def test_qualifier_stripped(self):
        """旧/新/改正前/改正後 は除去され、素の法令名と同じ結果になる"""
        assert normalize_law_ref_title("旧特許法") == "特許法"
        assert normalize_law_ref_title("改正後特許法") == "特許法"
        assert normalize_law_ref_title("旧特許法") == normalize_law_ref_title("特許法")

    def test_last_law_token_wins(self):
        """文中に複数の法令名があれば最後のものを採用する"""
        assert normalize_law_ref_title("この法律による改正後の特許法") == "特許法"
        assert normalize_law_ref_title("民事訴訟法の規定により刑法") == "刑法"

    def test_leading_article_noise_and_connective(self):
        """境界に漏れ込んだ条番号と接続語「中」を除去する"""
        assert normalize_law_ref_title("三第一条中特許法") == "特許法"
        assert normalize_law_ref_title("1条中民法") == "民法"

    def test_connective_split(self):
        """「○○中△△法」は右側の法令名に絞り込む"""
        assert normalize_law_ref_title("規定中特許法") == "特許法"

    def test_qualifier_on_both_sides_of_connective(self):
        assert normalize_law_ref_title("旧第五条中新特許法") == "特許法"

    def test_brackets_trimmed(self):
        assert normalize_law_ref_title("「民法」") == "民法"
        assert normalize_law_ref_title("（民法）") == "民法"

    def test_compound_title_kept(self):
        assert normalize_law_ref_title("刑法施行法") == "刑法施行法"

    def test_leading_naka_always_stripped(self):
        """先頭の「中」は接続語として除去するため、「中」で始まる法令名は1文字欠ける（既知の制約）"""
        assert normalize_law_ref_title("中小企業基本法") == "小企業基本法"


class TestNormalizeRejects:
    """正規化できない断片は None"""

    @pytest.mark.parametrize("fragment", ["同法", "同法律", "この法律", "本法", "前記法", "「同法」"])
    def test_anaphoric_labels(self, fragment):
        assert normalize_law_ref_title(fragment) is None

    def test_anaphora_unmasked_by_stripping(self):
        """除去の結果として現れた照応語も拒否する"""
        assert normalize_law_ref_title("第三条中同法") is None

    def test_too_short(self):
        """修飾語除去後に1文字しか残らなければ None"""
        assert normalize_law_ref_title("新法") is None
        assert normalize_law_ref_title("法") is None

    def test_empty_and_punctuation_only(self):
        assert normalize_law_ref_title("") is None
        assert normalize_law_ref_title("「」、。") is None

    def test_no_law_suffix(self):
        assert normalize_law_ref_title("特許") is None


class TestNormalizeInvariants:
    """どんな入力でも照応語や1文字トークンは返さない"""

    FRAGMENTS = [
        "同法", "新法", "旧法", "前記法", "第一条中本法", "改正前の同法律",
        "二中法", "民法", "旧民法", "改正後の民法", "第十条の規定中商法",
        "この法律", "規則", "条例", "「条約」", "中新法",
    ]

    @pytest.mark.parametrize("fragment", FRAGMENTS)
    def test_never_returns_ambiguous_or_short(self, fragment):
        result = normalize_law_ref_title(fragment)
        if result is not None:
            assert result not in AMBIGUOUS_LAW_LABELS
            assert len(result) >= 2


class TestHelpers:
    def test_strip_amendment_qualifier_only_once(self):
        assert strip_amendment_qualifier("旧新民法") == "新民法"

    def test_strip_leading_noise(self):
        assert strip_leading_noise("第十九条の二") == "の二"
        assert strip_leading_noise("123民法") == "民法"

    def test_split_connective_requires_law_suffix(self):
        assert split_connective("規定中特許法") == "特許法"
        assert split_connective("民法中改正") == "民法中改正"
