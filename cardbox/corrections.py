"""
OCR correction rules for business card text.

Rules are literal find/replace pairs applied one after another, each to the
output of the previous one. Built-in rules run first, then rules contributed
by enabled card templates, then user-defined overrides.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

Rule = Tuple[str, str]


def _digit_context_rules() -> List[Rule]:
    """Lowercase l / uppercase O directly after a digit are read as 1 / 0.

    `1l` runs last so that runs like `2ll` resolve fully: `21l` then `211`.
    """
    digits = "023456789" + "1"
    rules = [(f"{d}l", f"{d}1") for d in digits]
    rules += [(f"{d}O", f"{d}0") for d in digits]
    return rules


BUILTIN_RULES: List[Rule] = [
    # Full-width punctuation and digits
    ("．", "."),
    ("，", ","),
    ("：", ":"),
    ("；", ";"),
    ("（", "("),
    ("）", ")"),
    ("＠", "@"),
    ("＋", "+"),
    ("－", "-"),
    *[(chr(0xFF10 + i), str(i)) for i in range(10)],

    # Vertical bar look-alikes
    ("｜", "|"),
    ("丨", "|"),
    ("L|NE", "LINE"),
    ("TAX|", "TAXI"),

    # Address abbreviations
    ("5ec.", "Sec."),
    ("Sec.l", "Sec. 1"),

    # Digit / letter confusion
    ("lO", "10"),
    ("l7", "17"),
    *_digit_context_rules(),
]


class CorrectionRuleSet:
    """Ordered, sequential literal corrections.

    Args:
        overrides: User-defined wrong -> correct mapping, applied last
        extra_rules: Additional rules (e.g. from card templates), applied
            between the built-ins and the overrides
        builtin_rules: Replace the built-in list entirely
    """

    def __init__(
        self,
        overrides: Optional[Mapping[str, str]] = None,
        extra_rules: Iterable[Rule] = (),
        builtin_rules: Optional[Iterable[Rule]] = None,
    ):
        base = BUILTIN_RULES if builtin_rules is None else builtin_rules
        self._rules: List[Rule] = [(w, c) for w, c in base if w]
        self._rules.extend((w, c) for w, c in extra_rules if w)
        self.overrides: Dict[str, str] = dict(overrides or {})
        self._rules.extend((w, c) for w, c in self.overrides.items() if w)

        logger.debug(f"Correction rule set built with {len(self._rules)} rules "
                     f"({len(self.overrides)} user overrides)")

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    def correct(self, text: str) -> str:
        corrected = text
        for wrong, right in self._rules:
            corrected = corrected.replace(wrong, right)
        return corrected

    def __len__(self) -> int:
        return len(self._rules)
