"""
Field classifiers for business card text fragments.

Each predicate looks at one fragment on its own. A fragment can satisfy
several predicates; `FieldClassifier.classify` resolves that with a fixed,
explicit precedence list.
"""

import re
from typing import Callable, Iterable, List, Optional, Tuple

from .models import CJK_RE, FieldCategory
from .templates import CardTemplate

# =========================
# KEYWORDS
# =========================

POSITION_KEYWORDS = [
    "經理", "经理", "總監", "总监", "主任", "專員", "专员", "工程師", "工程师",
    "設計師", "设计师", "分析師", "分析师", "顧問", "顾问", "助理", "主管",
    "總經理", "总经理", "副總", "副总", "協理", "协理", "襄理", "課長", "课长",
    "組長", "组长", "部長", "部长", "處長", "处长", "會計", "会计",
    "董事長", "董事长", "執行長", "执行长", "Finance",
    "CEO", "CTO", "CFO", "COO", "Manager", "Director", "Engineer", "Designer",
    "Analyst", "Consultant", "Assistant", "Supervisor", "Lead", "Senior", "Junior",
    "President", "Founder", "Specialist", "Accountant",
]

COMPANY_KEYWORDS = [
    "有限公司", "股份有限公司", "公司", "企業", "企业", "集團", "集团", "科技",
    "資訊", "资讯", "工業", "工业", "貿易", "贸易", "實業", "实业",
    "Ltd", "Inc", "Corp", "Co.", "Company", "Technology", "Systems", "Group",
    "Enterprise", "Industries", "Solutions", "Services", "International",
]

ADDRESS_KEYWORDS = [
    "台北", "臺北", "新北", "台中", "臺中", "台南", "臺南", "高雄", "桃園", "桃园",
    "新竹", "基隆", "市", "區", "区", "路", "街", "號", "号", "樓", "楼", "巷", "弄",
    "Road", "Street", "Ave", "Avenue", "Taiwan", "Taipei", "Floor", "No.", "Sec.",
    "Rd.", "Dist.",
]

BUSINESS_TERMS = [
    "有限公司", "股份", "企業", "企业", "Ltd", "Inc", "Corp", "經理", "经理",
    "總監", "总监", "工程師", "工程师", "Finance", "會計", "会计", "專員", "专员",
    "資深", "资深", "推薦", "推荐", "序號", "序号",
]

WEBSITE_KEYWORDS = ["www.", "http://", "https://", ".com", ".tw", ".org", ".net", ".gov", ".edu"]

COMPANY_ID_MARKERS = ["統一編號", "统一编号", "統編", "统编"]

# =========================
# PATTERNS
# =========================

PHONE_PATTERNS = [
    re.compile(r"^(\+?886|0)?[0-9]{8,10}$"),                          # Taiwan
    re.compile(r"^[0-9]{3,4}[\-\s]?[0-9]{3,4}[\-\s]?[0-9]{3,4}$"),     # grouped
    re.compile(r"^\+?[0-9]{10,15}$"),                                 # international
]

PHONE_LABEL_RE = re.compile(
    r"^\s*(?:(tel|phone|mobile|mob|cell|fax|office|work|direct|電話|电话|手機|手机|行動|傳真|传真|公司)"
    r"\s*[:.]?|([tmfo])\s*[:.])\s*(?=[+(\d])",
    re.IGNORECASE,
)

EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
EMAIL_SEARCH_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")

# Taiwan mobile numbers: +886 9XX XXX XXX or 09XX XXX XXX
MOBILE_SEARCH_RE = re.compile(r"(?:\+?886[\s\-]*9\d{2}|(?<!\d)09\d{2})[\s\-]*\d{3}[\s\-]*\d{3}(?!\d)")
MOBILE_PREFIX_RE = re.compile(r"(?<!\d)09\d")

COMPANY_ID_RE = re.compile(r"^[0-9]{8}$")
_MARKERS = "|".join(re.escape(m) for m in COMPANY_ID_MARKERS)
COMPANY_ID_EXTRACT_RE = re.compile(rf"(?:{_MARKERS})\s*:?\s*(\d{{8}})")
COMPANY_ID_SEGMENT_RE = re.compile(rf"\|?\s*(?:{_MARKERS})\s*:?\s*\d{{8}}")
COMPANY_ID_TAIL_RE = re.compile(rf"\|?\s*(?:{_MARKERS}).*")

CJK_NAME_RE = re.compile(r"^[\u4e00-\u9fff]{2,4}$")
LATIN_NAME_RE = re.compile(r"^[A-Za-z]+(\s+[A-Za-z]+)*$")
LATIN_RE = re.compile(r"[A-Za-z]")
DIGIT_RE = re.compile(r"[0-9]")

SOCIAL_URL_PATTERNS = [
    ("linkedin", re.compile(r"linkedin\.com/(?:in|company)/([A-Za-z0-9_.\-]+)", re.IGNORECASE)),
    ("facebook", re.compile(r"\b(?:facebook|fb)\.com/([A-Za-z0-9_.\-]+)", re.IGNORECASE)),
    ("instagram", re.compile(r"instagram\.com/([A-Za-z0-9_.]+)", re.IGNORECASE)),
    ("twitter", re.compile(r"\b(?:twitter|x)\.com/([A-Za-z0-9_]+)", re.IGNORECASE)),
]
SOCIAL_LABEL_RE = re.compile(
    r"^(LINE|WeChat|WhatsApp|Telegram|Instagram|IG|Facebook|FB|Twitter|Skype)\s*(?:ID)?\s*[:]\s*@?(\S+)$",
    re.IGNORECASE,
)
SOCIAL_ALIASES = {"ig": "instagram", "fb": "facebook"}


# =========================
# HELPERS
# =========================

def phone_label(text: str) -> str:
    """Return the leading phone label (`tel`, `fax`, `手機` ...) lowercased, or ""."""
    m = PHONE_LABEL_RE.match(text)
    if not m:
        return ""
    return (m.group(1) or m.group(2)).lower()


def normalize_phone(text: str) -> str:
    """Drop a leading label, whitespace, dashes and parentheses."""
    text = PHONE_LABEL_RE.sub("", text, count=1)
    return re.sub(r"[\s\-()]", "", text)


def contains_latin(text: str) -> bool:
    return bool(LATIN_RE.search(text))


def contains_cjk(text: str) -> bool:
    return bool(CJK_RE.search(text))


def contains_phone_marker(text: str) -> bool:
    """True when the text carries a Taiwan mobile marker (`+886` or `09x`)."""
    return "+886" in text or bool(MOBILE_PREFIX_RE.search(text))


def contains_company_id_marker(text: str) -> bool:
    return any(marker in text for marker in COMPANY_ID_MARKERS)


def strip_company_id_segment(text: str) -> str:
    """Remove a `| 統一編號 12345678` segment (or a dangling marker) from text."""
    stripped = COMPANY_ID_SEGMENT_RE.sub("", text)
    stripped = COMPANY_ID_TAIL_RE.sub("", stripped)
    return stripped.strip(" |,")


def split_company_id(text: str) -> Tuple[Optional[str], Optional[str]]:
    """Split an address run that also carries the business registration id.

    Returns:
        (address, company_id); either may be None
    """
    m = COMPANY_ID_EXTRACT_RE.search(text)
    company_id = m.group(1) if m else None
    address = strip_company_id_segment(text)
    return address or None, company_id


def extract_email(text: str) -> Optional[str]:
    m = EMAIL_SEARCH_RE.search(text)
    return m.group(0) if m else None


def extract_mobile(text: str) -> Optional[str]:
    """Pull a Taiwan mobile number out of mixed text, `+` prefixed if international."""
    m = MOBILE_SEARCH_RE.search(text)
    if not m:
        return None
    phone = re.sub(r"[\s\-]", "", m.group(0))
    if phone.startswith("886"):
        phone = "+" + phone
    return phone


def parse_social_handle(text: str) -> Optional[Tuple[str, str]]:
    """Return (platform, handle) for a social profile fragment."""
    for platform, pattern in SOCIAL_URL_PATTERNS:
        m = pattern.search(text)
        if m:
            return platform, m.group(1)
    m = SOCIAL_LABEL_RE.match(text.strip())
    if m:
        platform = m.group(1).lower()
        return SOCIAL_ALIASES.get(platform, platform), m.group(2)
    return None


def is_social_profile(text: str) -> bool:
    return parse_social_handle(text) is not None


# =========================
# PREDICATES
# =========================

def is_phone(text: str) -> bool:
    cleaned = normalize_phone(text)
    return any(p.match(cleaned) for p in PHONE_PATTERNS)


def is_email(text: str) -> bool:
    return bool(EMAIL_RE.match(text))


def is_website(text: str) -> bool:
    lower = text.lower()
    return any(k in lower for k in WEBSITE_KEYWORDS)


def is_address(text: str) -> bool:
    if any(k in text for k in ADDRESS_KEYWORDS):
        return True
    return len(text) > 15 and bool(DIGIT_RE.search(text))


def is_company_id(text: str) -> bool:
    return bool(COMPANY_ID_RE.match(text))


def is_position(text: str) -> bool:
    return any(k in text for k in POSITION_KEYWORDS)


def is_all_caps_company(text: str) -> bool:
    """Multi-word all-caps Latin lines are usually company names."""
    return text.isupper() and len(text) > 5 and len(text.split()) >= 2 and not DIGIT_RE.search(text)


class FieldClassifier:
    """Classifies fragments into card fields.

    Company, name and business-term keyword lists can be extended by card
    templates; the remaining predicates are template independent.
    """

    def __init__(self, templates: Iterable[CardTemplate] = ()):
        templates = list(templates)
        self.name_hints: List[str] = [h for t in templates for h in t.name_hints]
        self.company_keywords: List[str] = COMPANY_KEYWORDS + [h for t in templates for h in t.company_hints]
        self.business_terms: List[str] = BUSINESS_TERMS + [b for t in templates for b in t.business_terms]

        # Highest precedence first
        self.precedence: Tuple[Tuple[Callable[[str], bool], FieldCategory], ...] = (
            (is_phone, FieldCategory.PHONE),
            (is_email, FieldCategory.EMAIL),
            (is_website, FieldCategory.WEBSITE),
            (is_address, FieldCategory.ADDRESS),
            (is_company_id, FieldCategory.COMPANY_ID),
            (is_position, FieldCategory.POSITION),
            (self.is_company, FieldCategory.COMPANY),
            (self.is_personal_name, FieldCategory.NAME),
        )

    def contains_business_term(self, text: str) -> bool:
        return any(term in text for term in self.business_terms)

    def has_name_hint(self, text: str) -> bool:
        return any(hint in text for hint in self.name_hints)

    def has_company_keyword(self, text: str) -> bool:
        return any(k in text for k in self.company_keywords)

    def is_company(self, text: str) -> bool:
        if len(text) <= 2:
            return False
        return self.has_company_keyword(text) or is_all_caps_company(text)

    def is_personal_name(self, text: str) -> bool:
        if self.has_name_hint(text):
            return True
        if not 2 <= len(text) <= 20 or self.contains_business_term(text):
            return False
        return bool(CJK_NAME_RE.match(text) or LATIN_NAME_RE.match(text))

    def is_likely_person_name(self, text: str) -> bool:
        """Stricter name check used when rescanning for a missing name."""
        if self.contains_business_term(text) or DIGIT_RE.search(text):
            return False
        if contains_cjk(text):
            return bool(CJK_NAME_RE.match(text))
        parts = text.split(" ")
        return len(parts) >= 2 and all(len(p) >= 2 and p.isascii() and p.isalpha() for p in parts)

    def classify(self, text: str) -> FieldCategory:
        for predicate, category in self.precedence:
            if predicate(text):
                return category
        return FieldCategory.OTHER
