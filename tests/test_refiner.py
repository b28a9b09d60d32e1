"""
Tests for the context refinement pass.
"""

import pytest
from cardbox.classifiers import FieldClassifier, split_company_id, strip_company_id_segment
from cardbox.models import ContactRecord, TextFragment
from cardbox.refiner import refine_with_context


def make_fragments(texts):
    return [TextFragment(text=t, sequence_position=i) for i, t in enumerate(texts)]


class TestCompanyIdSplitting:

    def test_split_company_id(self):
        address, company_id = split_company_id("台北市大安區安和路一段27號 | 統一編號 52621439")
        assert address == "台北市大安區安和路一段27號"
        assert company_id == "52621439"

    def test_split_marker_only(self):
        address, company_id = split_company_id("統一編號: 52621439")
        assert address is None
        assert company_id == "52621439"

    def test_strip_dangling_marker(self):
        assert strip_company_id_segment("安和路一段27號, 统一编号") == "安和路一段27號"


class TestRefineWithContext:
    """Test cases for refine_with_context."""

    @pytest.fixture
    def classifier(self):
        return FieldClassifier()

    def test_merged_email_and_phone(self, classifier):
        """Test one fragment carrying both an email and a mobile number."""
        record = refine_with_context(
            make_fragments(["heidie@test.com +886933231545"]), ContactRecord(), classifier
        )
        assert record.email == "heidie@test.com"
        assert record.phone == "+886933231545"

    def test_merged_fragment_keeps_existing_values(self, classifier):
        record = ContactRecord(email="first@test.com", phone="0912345678")
        refine_with_context(make_fragments(["heidie@test.com 0933231545"]), record, classifier)
        assert record.email == "first@test.com"
        assert record.phone == "0912345678"

    def test_company_id_marker(self, classifier):
        record = refine_with_context(
            make_fragments(["台北市大安區安和路一段27號 | 統一編號 52621439"]), ContactRecord(), classifier
        )
        assert record.company_id == "52621439"
        assert record.address == "台北市大安區安和路一段27號"

    def test_social_handles(self, classifier):
        record = refine_with_context(
            make_fragments(["LINE ID: heidie123", "LINE ID: other", "linkedin.com/in/heidie-lin"]),
            ContactRecord(),
            classifier,
        )
        assert record.social_media == {"line": "heidie123", "linkedin": "heidie-lin"}
        assert record.website == ""

    def test_fills_only_empty_fields(self, classifier):
        record = ContactRecord(company="TaxiGo")
        refine_with_context(make_fragments(["LINE TAXI", "資深會計專員"]), record, classifier)
        assert record.company == "TaxiGo"
        assert record.position == "資深會計專員"

    def test_phone_context_from_previous_fragment(self, classifier):
        record = refine_with_context(
            make_fragments(["傳真", "02-2345-6789"]), ContactRecord(), classifier, context_window=1
        )
        assert record.fax_phone == "0223456789"
        assert record.phone == ""
