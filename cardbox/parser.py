import logging
from typing import Iterable, List, Optional, Sequence

from .analyzer import analyze_structure
from .assigner import assign_fields
from .classifiers import FieldClassifier
from .corrections import CorrectionRuleSet
from .fallback import resolve_fallbacks
from .finalizer import finalize
from .models import ContactRecord, TextFragment
from .refiner import refine_with_context
from .templates import CardTemplate, template_rules

logger = logging.getLogger(__name__)

DEFAULT_MIN_CONFIDENCE = 0.3


# =========================
# PARSER
# =========================

class CardParser:
    """Turns recognized text fragments into a ContactRecord.

    Pipeline: correct -> clean -> analyze -> assign -> refine -> fallback -> finalize.
    Each stage only fills fields that are still empty; none of them raise on
    bad input, they leave the field empty instead.

    Args:
        rules: Correction rule set, typically built per parse with the
            user's overrides. Defaults to the built-in rules.
        templates: Enabled known-card templates
        min_confidence: Fragments below this confidence are ignored
        context_window: Number of preceding fragments used as phone context
    """

    def __init__(
        self,
        rules: Optional[CorrectionRuleSet] = None,
        templates: Iterable[CardTemplate] = (),
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        context_window: int = 1,
    ):
        self.templates: List[CardTemplate] = list(templates)
        if rules is None:
            rules = CorrectionRuleSet(extra_rules=template_rules(self.templates))
        self.rules = rules
        self.classifier = FieldClassifier(self.templates)
        self.min_confidence = min_confidence
        self.context_window = context_window

    # =========================
    # PIPELINE API
    # =========================

    def parse(self, fragments: Sequence[TextFragment], image_data: Optional[bytes] = None) -> ContactRecord:
        record = ContactRecord(image_data=image_data)

        prepared = self.prepare_fragments(fragments)
        logger.debug(f"Parsing {len(prepared)} of {len(fragments)} fragments")
        if not prepared:
            return record

        structure = analyze_structure(prepared, self.classifier)
        record = assign_fields(structure, record, prepared, self.context_window, self.classifier)
        record = refine_with_context(prepared, record, self.classifier, self.context_window)
        record = resolve_fallbacks(prepared, record, self.classifier, self.templates)
        return finalize(record)

    def parse_texts(self, texts: Iterable[str], image_data: Optional[bytes] = None) -> ContactRecord:
        fragments = [TextFragment(text=t, sequence_position=i) for i, t in enumerate(texts)]
        return self.parse(fragments, image_data=image_data)

    def parse_text(self, text: str, image_data: Optional[bytes] = None) -> ContactRecord:
        """Parse newline-separated card text."""
        return self.parse_texts(text.split("\n"), image_data=image_data)

    # =========================
    # HELPERS
    # =========================

    def prepare_fragments(self, fragments: Sequence[TextFragment]) -> List[TextFragment]:
        """Correct and clean fragments, dropping low-confidence and empty ones."""
        prepared = []
        for fragment in sorted(fragments, key=lambda f: f.sequence_position):
            if fragment.confidence < self.min_confidence:
                logger.debug(f"Dropping low confidence fragment {fragment.text!r} ({fragment.confidence:.2f})")
                continue
            text = clean_text(self.rules.correct(fragment.text))
            if not text:
                continue
            prepared.append(TextFragment(
                text=text,
                confidence=fragment.confidence,
                sequence_position=fragment.sequence_position,
                bounding_box=fragment.bounding_box,
            ))
        return prepared


def clean_text(text: str) -> str:
    return text.strip().replace("\n", " ").replace("  ", " ")
