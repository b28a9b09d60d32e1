"""
Field assignment from classified buckets.

Also holds the per-field assignment rules the context refiner reuses, so
both passes fill a field the same way and never overwrite a filled one.
"""

import logging
from typing import List, Optional, Sequence

from .classifiers import (
    FieldClassifier,
    contains_company_id_marker,
    contains_latin,
    contains_phone_marker,
    is_all_caps_company,
    is_social_profile,
    normalize_phone,
    phone_label,
    split_company_id,
)
from .formatting import normalize_website, phone_key
from .models import CardStructure, ContactRecord, FieldCategory, PhoneType, TextFragment

logger = logging.getLogger(__name__)

FAX_KEYWORDS = ["fax", "傳真", "传真"]
WORK_KEYWORDS = ["work", "office", "公司", "工作", "辦公", "办公"]
MOBILE_LABELS = ["mobile", "mob", "cell", "手機", "手机", "行動", "m"]

CASCADE_ORDER = [PhoneType.MOBILE, PhoneType.WORK, PhoneType.FAX]


# =========================
# PHONES
# =========================

def phone_context(fragments: Sequence[TextFragment], index: int, window: int) -> str:
    """Text of the `window` fragments preceding `fragments[index]`."""
    if window <= 0:
        return ""
    start = max(0, index - window)
    return " ".join(f.text for f in fragments[start:index])


def determine_phone_type(phone: str, context: str = "") -> PhoneType:
    """Decide mobile / work / fax from the number's own label and nearby text."""
    label = phone_label(phone)
    if label in FAX_KEYWORDS or label == "f":
        return PhoneType.FAX
    if label in WORK_KEYWORDS or label == "o":
        return PhoneType.WORK
    if label in MOBILE_LABELS:
        return PhoneType.MOBILE

    lowered = context.lower()
    if any(k in lowered for k in FAX_KEYWORDS):
        return PhoneType.FAX
    if any(k in lowered for k in WORK_KEYWORDS):
        return PhoneType.WORK

    # Unlabelled numbers start the cascade at the mobile slot
    return PhoneType.MOBILE


def cascade_order(target: PhoneType) -> List[PhoneType]:
    return [target] + [t for t in CASCADE_ORDER if t is not target]


def assign_phone(record: ContactRecord, phone: str, context: str = "") -> Optional[PhoneType]:
    """Put a phone number in the first free slot, starting from its detected type.

    Returns:
        The slot used, or None if the number was already present or every
        slot is taken
    """
    value = normalize_phone(phone)
    if value.startswith("886"):
        value = "+" + value
    key = phone_key(value)
    if not key:
        return None

    slots = record.phone_slots()
    if any(key == phone_key(existing) for existing in slots.values() if existing):
        logger.debug(f"Phone {value} already assigned, skipping")
        return None

    target = determine_phone_type(phone, context)
    for slot in cascade_order(target):
        if not slots[slot]:
            record.set_phone_slot(slot, value)
            return slot

    logger.debug(f"No free phone slot for {value}")
    return None


# =========================
# OTHER FIELDS
# =========================

def assign_email(record: ContactRecord, email: str) -> bool:
    if email in (record.email, record.secondary_email):
        return False
    if not record.email:
        record.email = email
        return True
    if not record.secondary_email:
        record.secondary_email = email
        return True
    return False


def assign_address(record: ContactRecord, address: str) -> bool:
    """Latin-script addresses go to the English field, everything else to the local one.

    A company-id segment is split off into `company_id` first, so a bare
    `統一編號 12345678` line never occupies the address.
    """
    if is_social_profile(address):
        return False
    assigned = False
    if contains_company_id_marker(address):
        remainder, company_id = split_company_id(address)
        if company_id and not record.company_id:
            record.company_id = company_id
            assigned = True
        if not remainder:
            return assigned
        address = remainder
    if contains_latin(address):
        if not record.english_address:
            record.english_address = address
            return True
    elif not record.address:
        record.address = address
        return True
    return assigned


def assign_website(record: ContactRecord, website: str) -> bool:
    if record.website or is_social_profile(website):
        return False
    # Merged email/phone runs contain ".com" but are not websites
    if "@" in website or contains_phone_marker(website):
        return False
    record.website = normalize_website(website)
    return True


def assign_category(
    record: ContactRecord,
    category: FieldCategory,
    text: str,
    context: str = "",
) -> bool:
    """Fill the field for `category` from `text` if that field is still empty."""
    if category is FieldCategory.PHONE:
        return assign_phone(record, text, context) is not None
    if category is FieldCategory.EMAIL:
        return assign_email(record, text)
    if category is FieldCategory.WEBSITE:
        return assign_website(record, text)
    if category is FieldCategory.ADDRESS:
        return assign_address(record, text)
    if category is FieldCategory.COMPANY_ID:
        if not record.company_id:
            record.company_id = text
            return True
    elif category is FieldCategory.POSITION:
        if not record.position:
            record.set_position(text)
            return True
    elif category is FieldCategory.COMPANY:
        if not record.company:
            record.company = text
            return True
    elif category is FieldCategory.NAME:
        if not record.name:
            record.set_name(text)
            return True
    return False


# =========================
# BUCKET PASS
# =========================

def assign_fields(
    structure: CardStructure,
    record: ContactRecord,
    fragments: Sequence[TextFragment] = (),
    context_window: int = 1,
    classifier: Optional[FieldClassifier] = None,
) -> ContactRecord:
    """Fill the record from the classified buckets using card layout conventions."""
    if classifier is None:
        classifier = FieldClassifier()
    index_by_position = {f.sequence_position: i for i, f in enumerate(fragments)}

    # A keyword company wins over an all-caps line, which may then be the name
    companies = structure[FieldCategory.COMPANY]
    keyworded = [entry for entry in companies if classifier.has_company_keyword(entry[0])]
    caps_names = []
    if keyworded:
        caps_names = [
            entry for entry in companies
            if entry not in keyworded and is_all_caps_company(entry[0])
            and classifier.is_likely_person_name(entry[0])
        ]
        companies = keyworded

    # Names sit at the top of most cards
    names = structure[FieldCategory.NAME] or caps_names
    if names and not record.name:
        text, _ = min(names, key=lambda entry: entry[1])
        record.set_name(text)
        logger.debug(f"Name {text!r}")

    if companies:
        assign_category(record, FieldCategory.COMPANY, companies[0][0])

    for category in (FieldCategory.POSITION, FieldCategory.COMPANY_ID):
        entries = structure[category]
        if entries:
            assign_category(record, category, entries[0][0])

    for text, position in structure[FieldCategory.PHONE]:
        index = index_by_position.get(position)
        context = phone_context(fragments, index, context_window) if index is not None else ""
        slot = assign_phone(record, text, context)
        logger.debug(f"Phone {text!r} -> {slot.value if slot else 'dropped'}")

    for text, _ in structure[FieldCategory.EMAIL][:2]:
        assign_email(record, text)

    for text, _ in structure[FieldCategory.WEBSITE]:
        if assign_website(record, text):
            break

    for text, _ in structure[FieldCategory.ADDRESS]:
        assign_address(record, text)

    return record
