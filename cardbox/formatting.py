"""
Formatting and normalisation helpers shared by the parsing stages.
"""

import re

from .classifiers import EMAIL_RE

TW_MOBILE_RE = re.compile(r"^\+8869\d{8}$")

# Characters OCR commonly returns in place of digits inside a phone number
PHONE_CONFUSABLES = str.maketrans({"l": "1", "I": "1", "|": "1", "O": "0", "o": "0"})


def phone_key(phone: str) -> str:
    """Digits only, in local form, for comparing numbers regardless of formatting."""
    digits = re.sub(r"\D", "", phone)
    if digits.startswith("886"):
        digits = "0" + digits[3:]
    return digits


def correct_phone_number(phone: str) -> str:
    """Replace letters OCR confuses with digits."""
    return phone.translate(PHONE_CONFUSABLES)


def format_phone(phone: str) -> str:
    """Group Taiwan international mobile numbers as `+886 9XX XXX XXX`.

    Anything else is returned unchanged.
    """
    cleaned = re.sub(r"[^+0-9]", "", phone)
    if TW_MOBILE_RE.match(cleaned):
        local = cleaned[4:]
        return f"+886 {local[:3]} {local[3:6]} {local[6:]}"
    return phone


def normalize_website(website: str) -> str:
    lower = website.lower()
    if lower.startswith(("http://", "https://")):
        return website
    if lower.startswith("www."):
        return f"https://{website}"
    return f"https://www.{website}"


def is_valid_email(email: str) -> bool:
    return bool(email) and bool(EMAIL_RE.match(email))


def name_from_email(email: str) -> str:
    """Guess a display name from an email local part (`john.doe42@` -> `John Doe`)."""
    local = email.split("@")[0]
    words = [w for w in re.split(r"[0-9._\-]+", local) if w]
    return " ".join(w.capitalize() for w in words)
