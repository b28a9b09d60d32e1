"""
Final clean-up and validation of a parsed contact record.

Fields that fail validation are cleared rather than left malformed.
"""

import logging
import re

from .checksum import validate_taiwan_id
from .classifiers import contains_phone_marker
from .formatting import (
    correct_phone_number,
    format_phone,
    is_valid_email,
    name_from_email,
    normalize_website,
)
from .models import ContactRecord

logger = logging.getLogger(__name__)


def finalize(record: ContactRecord) -> ContactRecord:
    """Normalise formats and drop invalid values.

    Args:
        record: Record produced by the earlier stages

    Returns:
        The same record, cleaned in place
    """
    record.set_name(record.name.strip())
    record.company = record.company.strip()
    record.set_position(record.position.strip())

    for slot, value in record.phone_slots().items():
        if value:
            record.set_phone_slot(slot, format_phone(correct_phone_number(value)))

    if record.email and not is_valid_email(record.email):
        logger.debug(f"Clearing invalid email: {record.email}")
        record.email = ""
    if record.secondary_email and (not is_valid_email(record.secondary_email)
                                   or record.secondary_email == record.email):
        logger.debug(f"Clearing secondary email: {record.secondary_email}")
        record.secondary_email = ""

    if not record.name and record.email:
        record.set_name(name_from_email(record.email))
        logger.debug(f"Name inferred from email: {record.name}")

    if record.company_id:
        digits = re.sub(r"[^0-9]", "", record.company_id)
        if not validate_taiwan_id(digits):
            logger.debug(f"Clearing company id failing checksum: {record.company_id}")
            digits = ""
        record.company_id = digits

    # Merged fragments can leave an email or phone number in the website
    if record.website and ("@" in record.website or contains_phone_marker(record.website)):
        logger.debug(f"Discarding contaminated website: {record.website}")
        record.website = ""
    elif record.website:
        record.website = normalize_website(record.website)

    logger.info(
        f"Finalized card - name: {record.name!r}, company: {record.company!r}, "
        f"phones: {sum(1 for v in record.phone_slots().values() if v)}, email: {record.email!r}"
    )
    return record
