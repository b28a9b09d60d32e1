"""
Tests for CardParser class.

Tests end-to-end parsing of OCR fragments into a ContactRecord.
"""

import pytest
from cardbox.checksum import validate_taiwan_id
from cardbox.corrections import CorrectionRuleSet
from cardbox.formatting import format_phone
from cardbox.models import TextFragment
from cardbox.parser import CardParser, clean_text
from cardbox.templates import LINE_TAXI_TEMPLATE


SAMPLE_CARD = [
    "李亞昀",
    "LINE TAXI",
    "資深會計專員",
    "+886 933 231 545",
    "heidie@taxigo.com.tw",
    "www.linetaxi.com.tw",
    "106台北市大安區安和路一段27號17樓",
]


class TestCardParser:
    """Test cases for CardParser."""

    @pytest.fixture
    def parser(self):
        """Create parser instance."""
        return CardParser()

    def test_parser_initialization(self, parser):
        assert parser.min_confidence == 0.3
        assert parser.context_window == 1
        assert len(parser.rules) > 0
        assert parser.templates == []

    def test_parse_sample_card(self, parser):
        """Test a clean card maps every line to its field."""
        record = parser.parse_texts(SAMPLE_CARD)

        assert record.name == "李亞昀"
        assert record.chinese_name == "李亞昀"
        assert record.company == "LINE TAXI"
        assert record.position == "資深會計專員"
        assert record.phone == "+886 933 231 545"
        assert record.email == "heidie@taxigo.com.tw"
        assert record.website == "https://www.linetaxi.com.tw"
        assert record.address == "106台北市大安區安和路一段27號17樓"
        assert record.company_id == ""

    def test_mangled_mobile_number(self, parser):
        """Test an l read in place of 1 is corrected and formatted."""
        corrected = parser.rules.correct("93323l545")
        assert corrected == "933231545"
        assert format_phone("+886" + corrected) == "+886 933 231 545"

        record = parser.parse_texts(["+886 93323l545"])
        assert record.phone == "+886 933 231 545"

    def test_mangled_company_id(self, parser):
        """Test a corrected 8-digit id lands in company_id, not a phone slot."""
        corrected = parser.rules.correct("5262l439")
        assert corrected == "52621439"
        assert validate_taiwan_id(corrected)

        record = parser.parse_texts(["李亞昀", "5262l439"])
        assert record.company_id == "52621439"
        assert record.phone == ""

    def test_merged_email_and_phone(self, parser):
        """Test one fragment split into email and phone."""
        record = parser.parse_texts(["heidie@test.com +886933231545"])

        assert record.email == "heidie@test.com"
        assert record.phone == "+886 933 231 545"
        assert record.website == ""
        assert record.name == "Heidie"

    def test_three_phone_cascade(self, parser):
        record = parser.parse_texts(["0223456789", "0287654321", "0412345678"])

        assert record.phone == "0223456789"
        assert record.work_phone == "0287654321"
        assert record.fax_phone == "0412345678"

    def test_no_phone_in_two_slots(self, parser):
        """Test the same number in local and international form fills one slot."""
        record = parser.parse_texts(["+886 933 231 545", "Mobile: 0933-231-545", "886933231545"])

        assert record.phone == "+886 933 231 545"
        assert record.work_phone == ""
        assert record.fax_phone == ""

    def test_company_id_with_address(self, parser):
        record = parser.parse_texts(["台北市大安區安和路一段27號 | 統一編號 52621439"])

        assert record.company_id == "52621439"
        assert record.address == "台北市大安區安和路一段27號"

    def test_all_caps_name_kept(self, parser):
        """Test a name printed in capitals is not taken as the company."""
        record = parser.parse_texts(["JOHN SMITH", "Acme Ltd", "Senior Engineer"])

        assert record.name == "JOHN SMITH"
        assert record.company == "Acme Ltd"
        assert record.position == "Senior Engineer"

    def test_website_after_merged_email_and_phone(self, parser):
        record = parser.parse_texts(["heidie@test.com +886933231545", "www.test.com"])

        assert record.email == "heidie@test.com"
        assert record.phone == "+886 933 231 545"
        assert record.website == "https://www.test.com"

    def test_company_id_line_before_address(self, parser):
        record = parser.parse_texts(["統一編號 52621439", "台北市大安區安和路一段27號"])

        assert record.company_id == "52621439"
        assert record.address == "台北市大安區安和路一段27號"

    def test_labelled_landline_not_taken_as_company_id(self, parser):
        """Test an 8-digit landline that passes the checksum stays a phone."""
        assert validate_taiwan_id("27001235")

        record = parser.parse_texts(["王小明", "Tel: 2700 1235"])

        assert record.name == "王小明"
        assert record.phone == "27001235"
        assert record.company_id == ""

    def test_invalid_company_id_cleared(self, parser):
        record = parser.parse_texts(["統一編號 52621438"])
        assert record.company_id == ""

    def test_low_confidence_fragments_dropped(self, parser):
        fragments = [
            TextFragment(text="李亞昀", confidence=0.9, sequence_position=0),
            TextFragment(text="王小明", confidence=0.1, sequence_position=1),
            TextFragment(text="heidie@test.com", confidence=0.3, sequence_position=2),
        ]
        record = parser.parse(fragments)

        assert record.name == "李亞昀"
        assert record.email == "heidie@test.com"

    def test_fragments_ordered_by_position(self, parser):
        fragments = [
            TextFragment(text="王小明", sequence_position=5),
            TextFragment(text="李亞昀", sequence_position=0),
        ]
        assert parser.parse(fragments).name == "李亞昀"

    def test_parse_text(self, parser):
        record = parser.parse_text("李亞昀\nLINE TAXI\n\nheidie@taxigo.com.tw")
        assert record.name == "李亞昀"
        assert record.company == "LINE TAXI"
        assert record.email == "heidie@taxigo.com.tw"

    def test_empty_input(self, parser):
        record = parser.parse([])
        assert record.is_empty()

    def test_image_data_attached(self, parser):
        record = parser.parse_texts(["李亞昀"], image_data=b"img")
        assert record.image_data == b"img"

    def test_user_overrides(self):
        parser = CardParser(rules=CorrectionRuleSet(overrides={"Heidi ": "Heidie "}))
        record = parser.parse_texts(["Heidi Lin"])
        assert record.name == "Heidie Lin"

    def test_context_window(self):
        """Test a fax label two fragments back needs a wider window."""
        texts = ["Fax", "李亞昀", "02-2345-6789"]

        assert CardParser(context_window=1).parse_texts(texts).fax_phone == ""
        assert CardParser(context_window=2).parse_texts(texts).fax_phone == "0223456789"


class TestCardParserTemplates:
    """Test cases for parsing with a known-card template enabled."""

    @pytest.fixture
    def parser(self):
        return CardParser(templates=[LINE_TAXI_TEMPLATE])

    def test_template_card(self, parser):
        record = parser.parse_texts(["LINE TAXI", "Heidie Lin", "Finance l 資深會計專員"])

        assert record.company == "LINE TAXI"
        assert record.name == "Heidie Lin"
        assert record.english_position == "Finance"
        assert record.chinese_position == "資深會計專員"
        assert record.website == "https://www.linetaxi.com.tw"

    def test_template_correction_rules(self, parser):
        assert parser.rules.correct("TTaxiG0") == "TaxiGo"

    def test_template_disabled_by_default(self):
        record = CardParser().parse_texts(["LINE TAXI", "Finance l 資深會計專員"])
        assert record.website == ""


def test_clean_text():
    assert clean_text("  LINE\nTAXI  ") == "LINE TAXI"
    assert clean_text("a  b") == "a b"
    assert clean_text("   ") == ""
