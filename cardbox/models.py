"""
Data model for the business card parsing engine.

Fragments come from an external OCR engine; the ContactRecord is built up
in place by each parsing stage and handed back to the caller.
"""

import base64
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

CJK_RE = re.compile(r"[\u4e00-\u9fff]")


# =========================
# INPUT
# =========================

@dataclass(frozen=True)
class TextFragment:
    """One piece of recognized text with its confidence and geometry."""
    text: str
    confidence: float = 1.0
    sequence_position: int = 0
    bounding_box: Any = None


class FieldCategory(Enum):
    NAME = "name"
    COMPANY = "company"
    POSITION = "position"
    PHONE = "phone"
    EMAIL = "email"
    WEBSITE = "website"
    ADDRESS = "address"
    COMPANY_ID = "company_id"
    OTHER = "other"


class PhoneType(Enum):
    MOBILE = "mobile"
    WORK = "work"
    FAX = "fax"


@dataclass
class CardStructure:
    """Fragments grouped by category, each bucket in original card order."""
    buckets: Dict[FieldCategory, List[Tuple[str, int]]] = field(
        default_factory=lambda: {category: [] for category in FieldCategory}
    )

    def add(self, category: FieldCategory, text: str, position: int) -> None:
        self.buckets[category].append((text, position))

    def __getitem__(self, category: FieldCategory) -> List[Tuple[str, int]]:
        return self.buckets[category]

    def to_dict(self) -> Dict[str, List[Tuple[str, int]]]:
        return {category.value: list(entries) for category, entries in self.buckets.items()}


# =========================
# OUTPUT
# =========================

@dataclass
class ContactRecord:
    name: str = ""
    english_name: str = ""
    chinese_name: str = ""
    company: str = ""
    position: str = ""
    english_position: str = ""
    chinese_position: str = ""
    phone: str = ""
    work_phone: str = ""
    fax_phone: str = ""
    email: str = ""
    secondary_email: str = ""
    website: str = ""
    address: str = ""
    english_address: str = ""
    company_id: str = ""
    social_media: Dict[str, str] = field(default_factory=dict)
    image_data: Optional[bytes] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def set_name(self, full_name: str) -> None:
        """Set the full name and split it into Latin and CJK parts."""
        self.name = full_name
        english_parts = []
        chinese_parts = []
        for part in full_name.split(" "):
            if CJK_RE.search(part):
                chinese_parts.append(part)
            elif any(c.isalnum() for c in part):
                english_parts.append(part)
        self.english_name = " ".join(english_parts)
        self.chinese_name = " ".join(chinese_parts)

    def set_position(self, full_position: str) -> None:
        """Set the full position; a `|` separates English from Chinese."""
        self.position = full_position
        if "|" in full_position:
            parts = full_position.split("|")
            self.english_position = parts[0].strip()
            self.chinese_position = parts[1].strip()
        elif CJK_RE.search(full_position):
            self.english_position = ""
            self.chinese_position = full_position
        else:
            self.english_position = full_position
            self.chinese_position = ""

    def phone_slots(self) -> Dict[PhoneType, str]:
        return {
            PhoneType.MOBILE: self.phone,
            PhoneType.WORK: self.work_phone,
            PhoneType.FAX: self.fax_phone,
        }

    def set_phone_slot(self, phone_type: PhoneType, value: str) -> None:
        if phone_type is PhoneType.MOBILE:
            self.phone = value
        elif phone_type is PhoneType.WORK:
            self.work_phone = value
        else:
            self.fax_phone = value

    def is_empty(self) -> bool:
        return not any([
            self.name, self.company, self.position, self.phone, self.work_phone,
            self.fax_phone, self.email, self.secondary_email, self.website,
            self.address, self.english_address, self.company_id, self.social_media,
        ])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "english_name": self.english_name,
            "chinese_name": self.chinese_name,
            "company": self.company,
            "position": self.position,
            "english_position": self.english_position,
            "chinese_position": self.chinese_position,
            "phone": self.phone,
            "work_phone": self.work_phone,
            "fax_phone": self.fax_phone,
            "email": self.email,
            "secondary_email": self.secondary_email,
            "website": self.website,
            "address": self.address,
            "english_address": self.english_address,
            "company_id": self.company_id,
            "social_media": dict(self.social_media),
            "image_data": base64.b64encode(self.image_data).decode("ascii") if self.image_data else "",
            "created_at": self.created_at.isoformat(),
        }
