"""
Context refinement: a second pass over the fragment sequence.

The bucket pass sees each fragment in isolation. This pass handles fragments
where OCR merged two logical fields into one text run, picks up social
handles, and fills whatever is still empty using the previous fragments as
context.
"""

import logging
from typing import Sequence

from .assigner import assign_category, assign_phone, phone_context
from .classifiers import (
    FieldClassifier,
    contains_company_id_marker,
    contains_phone_marker,
    extract_email,
    extract_mobile,
    parse_social_handle,
    split_company_id,
)
from .models import ContactRecord, FieldCategory, TextFragment

logger = logging.getLogger(__name__)


def _refine_merged_email_phone(record: ContactRecord, text: str) -> None:
    email = extract_email(text)
    if email and not record.email:
        record.email = email
        logger.debug(f"  -> email from merged fragment: {email}")

    phone = extract_mobile(text)
    if phone and not record.phone:
        if assign_phone(record, phone) is not None:
            logger.debug(f"  -> phone from merged fragment: {phone}")


def _refine_company_id(record: ContactRecord, text: str) -> None:
    address, company_id = split_company_id(text)
    if company_id and not record.company_id:
        record.company_id = company_id
        logger.debug(f"  -> company id: {company_id}")
    if address and not record.address:
        record.address = address
        logger.debug(f"  -> address: {address}")


def refine_with_context(
    fragments: Sequence[TextFragment],
    record: ContactRecord,
    classifier: FieldClassifier,
    context_window: int = 1,
) -> ContactRecord:
    """Walk the fragments in order and fill fields the bucket pass missed.

    Already filled fields are never overwritten.
    """
    for index, fragment in enumerate(fragments):
        text = fragment.text
        logger.debug(f"Refining [{index}] {text!r}")

        if "@" in text and contains_phone_marker(text):
            _refine_merged_email_phone(record, text)
            continue

        if contains_company_id_marker(text):
            _refine_company_id(record, text)
            continue

        social = parse_social_handle(text)
        if social:
            platform, handle = social
            if platform not in record.social_media:
                record.social_media[platform] = handle
                logger.debug(f"  -> {platform}: {handle}")
            continue

        category = classifier.classify(text)
        if category is FieldCategory.OTHER:
            continue
        context = phone_context(fragments, index, context_window)
        if assign_category(record, category, text, context):
            logger.debug(f"  -> {category.value}: {text}")

    return record
