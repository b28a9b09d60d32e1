"""
Fallback resolution for fields still empty after the context pass.
"""

import logging
import re
from typing import Iterable, Optional, Sequence

from .checksum import validate_taiwan_id
from .classifiers import (
    FieldClassifier,
    contains_company_id_marker,
    contains_phone_marker,
    is_company_id,
    split_company_id,
    strip_company_id_segment,
)
from .formatting import correct_phone_number, format_phone, phone_key
from .models import ContactRecord, TextFragment
from .templates import CardTemplate

logger = logging.getLogger(__name__)

# Mobile number that may still contain OCR letter/digit confusions
LOOSE_MOBILE_RE = re.compile(r"(?:\+?886[\s\-]*|(?<![0-9A-Za-z])0)9[0-9lIO|\s\-]{8,16}")
STRICT_MOBILE_RE = re.compile(r"^(\+8869\d{8}|09\d{8})")


def _clean_name(text: str) -> str:
    return text.replace("•", " ").replace("  ", " ").strip()


def _find_name(fragments: Sequence[TextFragment], record: ContactRecord,
               classifier: FieldClassifier) -> Optional[str]:
    taken = {record.company, record.position}
    for fragment in fragments:
        if classifier.has_name_hint(fragment.text):
            return _clean_name(fragment.text)
    for fragment in fragments:
        text = fragment.text
        if text not in taken and classifier.is_likely_person_name(text):
            return text
    return None


def _company_id_candidate(text: str) -> Optional[str]:
    if is_company_id(text):
        return text
    if not contains_company_id_marker(text):
        return None
    _, company_id = split_company_id(text)
    if company_id:
        return company_id
    digits = re.sub(r"[^0-9]", "", text)
    return digits if len(digits) == 8 else None


def _extract_loose_mobile(text: str) -> Optional[str]:
    m = LOOSE_MOBILE_RE.search(text)
    if not m:
        return None
    candidate = re.sub(r"[^+0-9]", "", correct_phone_number(m.group(0)))
    if candidate.startswith("886"):
        candidate = "+" + candidate
    strict = STRICT_MOBILE_RE.match(candidate)
    return strict.group(1) if strict else None


def resolve_fallbacks(
    fragments: Sequence[TextFragment],
    record: ContactRecord,
    classifier: FieldClassifier,
    templates: Iterable[CardTemplate] = (),
) -> ContactRecord:
    """Recover name, company id, phone and website with looser heuristics."""
    templates = list(templates)
    logger.debug("Running fallback resolution")

    # A company string that landed in the name field is not a name
    if record.name and (record.name == record.company
                        or any(t.matches_company(record.name) for t in templates)):
        logger.info(f"Discarding name that looks like a company: {record.name}")
        record.set_name("")

    if not record.name:
        name = _find_name(fragments, record, classifier)
        if name:
            record.set_name(name)
            logger.debug(f"Fallback name: {name}")

    # Only a bare 8-digit run or a marked id counts; labelled or grouped numbers are phones
    if not record.company_id:
        for fragment in fragments:
            digits = _company_id_candidate(fragment.text)
            if digits and validate_taiwan_id(digits):
                record.company_id = digits
                logger.debug(f"Fallback company id: {digits} (from {fragment.text!r})")
                break

    # A checksum-valid id read as a bare 8-digit phone number is the id
    if record.company_id:
        for slot, value in record.phone_slots().items():
            if value and phone_key(value) == record.company_id:
                record.set_phone_slot(slot, "")
                logger.debug(f"Removed company id {value} from {slot.value} phone")

    if not record.phone:
        others = {phone_key(v) for v in record.phone_slots().values() if v}
        for fragment in fragments:
            if not (contains_phone_marker(fragment.text) or "886" in fragment.text):
                continue
            phone = _extract_loose_mobile(fragment.text)
            if phone and phone_key(phone) not in others:
                record.phone = format_phone(phone)
                logger.debug(f"Fallback phone: {record.phone} (from {fragment.text!r})")
                break

    if not record.website:
        for template in templates:
            if template.default_website and template.matches_company(record.company):
                record.website = template.default_website
                logger.debug(f"Template {template.name} website: {record.website}")
                break

    if record.company_id and contains_company_id_marker(record.address):
        record.address = strip_company_id_segment(record.address)
        logger.debug(f"Cleaned address: {record.address}")

    return record
