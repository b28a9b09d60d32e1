"""
Taiwan business registration number (統一編號) checksum.
"""

WEIGHTS = [1, 2, 1, 2, 1, 2, 4, 1]


def _reduce(value: int) -> int:
    """Sum the digits of a product until a single digit remains."""
    while value >= 10:
        value = value // 10 + value % 10
    return value


def validate_taiwan_id(company_id: str) -> bool:
    """Validate an 8-digit Taiwan business registration number.

    The first seven digits are weighted by ``WEIGHTS``, each product is
    digit-summed, and the check value ``(10 - sum % 10) % 10`` must equal the
    last digit. The 8th digit is the check digit, not a summed term, so its
    weight in ``WEIGHTS`` is never applied. When the 7th digit is 7 its product (28) may count as 1 or 0,
    so the check value plus one is accepted as well.

    Args:
        company_id: Candidate id, digits only

    Returns:
        True if the id passes the checksum
    """
    if len(company_id) != 8 or not company_id.isdigit():
        return False

    digits = [int(c) for c in company_id]
    total = sum(_reduce(d * w) for d, w in zip(digits[:7], WEIGHTS[:7]))
    check = (10 - total % 10) % 10

    if check == digits[7]:
        return True
    return digits[6] == 7 and (check + 1) % 10 == digits[7]
