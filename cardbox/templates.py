"""
Known-card templates.

A template bundles hints learned from one specific card design: names and
company strings to recognise, extra business terms that must never be read
as a personal name, card-specific correction rules and a default website.
Templates are opt-in; none are active unless configured.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple


@dataclass(frozen=True)
class CardTemplate:
    name: str
    name_hints: Tuple[str, ...] = ()
    company_hints: Tuple[str, ...] = ()
    business_terms: Tuple[str, ...] = ()
    correction_rules: Tuple[Tuple[str, str], ...] = ()
    default_website: str = ""

    def matches_company(self, company: str) -> bool:
        return bool(company) and any(hint in company for hint in self.company_hints)


LINE_TAXI_TEMPLATE = CardTemplate(
    name="line_taxi",
    name_hints=("Heidie Lin", "李亞畇", "李亚畇"),
    company_hints=("LINE TAXI", "TaxiGo", "TAXI"),
    business_terms=("TAXI", "LINE"),
    correction_rules=(
        ("TTaxiG0", "TaxiGo"),
        ("Finance l", "Finance |"),
        ("Finance I", "Finance |"),
        ("Finance 1", "Finance |"),
    ),
    default_website="https://www.linetaxi.com.tw",
)

KNOWN_TEMPLATES: Dict[str, CardTemplate] = {
    LINE_TAXI_TEMPLATE.name: LINE_TAXI_TEMPLATE,
}


def get_templates(names: Iterable[str]) -> List[CardTemplate]:
    """Look up templates by name, ignoring blanks and unknown names."""
    templates = []
    for name in names:
        name = name.strip()
        if name in KNOWN_TEMPLATES:
            templates.append(KNOWN_TEMPLATES[name])
    return templates


def template_rules(templates: Iterable[CardTemplate]) -> List[Tuple[str, str]]:
    rules: List[Tuple[str, str]] = []
    for template in templates:
        rules.extend(template.correction_rules)
    return rules
