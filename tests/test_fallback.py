"""
Tests for fallback resolution.
"""

import pytest
from cardbox.classifiers import FieldClassifier
from cardbox.fallback import resolve_fallbacks
from cardbox.models import ContactRecord, TextFragment
from cardbox.templates import LINE_TAXI_TEMPLATE


def make_fragments(texts):
    return [TextFragment(text=t, sequence_position=i) for i, t in enumerate(texts)]


class TestResolveFallbacks:
    """Test cases for resolve_fallbacks."""

    @pytest.fixture
    def classifier(self):
        return FieldClassifier()

    def test_name_equal_to_company_is_replaced(self, classifier):
        record = ContactRecord(company="LINE TAXI")
        record.set_name("LINE TAXI")

        resolve_fallbacks(make_fragments(["LINE TAXI", "Mary Lin"]), record, classifier)

        assert record.name == "Mary Lin"
        assert record.english_name == "Mary Lin"

    def test_template_name_hint_first(self):
        classifier = FieldClassifier([LINE_TAXI_TEMPLATE])
        record = ContactRecord(company="LINE TAXI")

        resolve_fallbacks(
            make_fragments(["Mary Lin", "• Heidie Lin •"]), record, classifier, [LINE_TAXI_TEMPLATE]
        )

        assert record.name == "Heidie Lin"

    def test_company_name_from_template_not_a_name(self):
        classifier = FieldClassifier([LINE_TAXI_TEMPLATE])
        record = ContactRecord()
        record.set_name("TaxiGo")

        resolve_fallbacks(make_fragments(["TaxiGo"]), record, classifier, [LINE_TAXI_TEMPLATE])

        assert record.name == ""

    def test_company_id_from_digits(self, classifier):
        fragments = make_fragments(["12345678", "統編: 5262-1439"])
        record = resolve_fallbacks(fragments, ContactRecord(), classifier)
        assert record.company_id == "52621439"

    def test_bare_company_id_digits(self, classifier):
        record = resolve_fallbacks(make_fragments(["52621439"]), ContactRecord(), classifier)
        assert record.company_id == "52621439"

    def test_labelled_or_grouped_phone_not_taken_as_id(self, classifier):
        """Test a checksum-valid landline keeps its phone slot."""
        test_cases = ["Tel: 2700 1235", "2700-1235", "5262 1439"]

        for text in test_cases:
            record = ContactRecord(phone="27001235")
            resolve_fallbacks(make_fragments([text]), record, classifier)
            assert record.company_id == "", f"Failed for: {text}"
            assert record.phone == "27001235", f"Failed for: {text}"

    def test_company_id_removed_from_phone_slot(self, classifier):
        """Test a checksum-valid id first read as a phone ends up only as the id."""
        record = ContactRecord(phone="52621439", work_phone="0223456789")

        resolve_fallbacks(make_fragments(["52621439", "0223456789"]), record, classifier)

        assert record.company_id == "52621439"
        assert record.phone == ""
        assert record.work_phone == "0223456789"

    def test_loose_mobile_recovered(self, classifier):
        record = resolve_fallbacks(make_fragments(["M +886 93323l 545"]), ContactRecord(), classifier)
        assert record.phone == "+886 933 231 545"

    def test_loose_mobile_not_duplicated(self, classifier):
        record = ContactRecord(work_phone="+886933231545")
        resolve_fallbacks(make_fragments(["+886 933 231 545"]), record, classifier)
        assert record.phone == ""

    def test_template_default_website(self, classifier):
        record = ContactRecord(company="LINE TAXI")
        resolve_fallbacks([], record, classifier, [LINE_TAXI_TEMPLATE])
        assert record.website == "https://www.linetaxi.com.tw"

    def test_no_default_website_without_template(self, classifier):
        record = ContactRecord(company="LINE TAXI")
        resolve_fallbacks([], record, classifier)
        assert record.website == ""

    def test_address_cleanup(self, classifier):
        record = ContactRecord(
            company_id="52621439",
            address="台北市大安區安和路一段27號 | 統一編號 52621439",
        )
        resolve_fallbacks([], record, classifier)
        assert record.address == "台北市大安區安和路一段27號"
