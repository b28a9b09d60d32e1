"""
Business Card Scan Pipeline
Recognizer -> parser, with the user's correction overrides injected per call.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional, Sequence

from .corrections import CorrectionRuleSet
from .models import TextFragment
from .ocr import CardRecognitionError, FragmentRecognizer
from .parser import DEFAULT_MIN_CONFIDENCE, CardParser
from .rule_store import JsonRuleStore
from .templates import CardTemplate, template_rules

logger = logging.getLogger(__name__)


class CardScanPipeline:
    """Complete pipeline for turning a card image into contact data."""

    def __init__(
        self,
        recognizer: Optional[FragmentRecognizer] = None,
        rule_store: Optional[JsonRuleStore] = None,
        templates: Iterable[CardTemplate] = (),
        min_confidence: float = DEFAULT_MIN_CONFIDENCE,
        context_window: int = 1,
        ocr_languages: List[str] = None,
        ocr_gpu: bool = False,
    ):
        self.recognizer = recognizer or FragmentRecognizer(
            languages=ocr_languages,
            gpu=ocr_gpu,
            min_confidence=min_confidence,
        )
        self.rule_store = rule_store
        self.templates = list(templates)
        self.min_confidence = min_confidence
        self.context_window = context_window

        logger.info(f"CardScanPipeline initialized with templates: {[t.name for t in self.templates]}")

    # ======================================================
    # PARSING
    # ======================================================

    def build_parser(self) -> CardParser:
        """Parser with the current overrides from the rule store."""
        overrides = self.rule_store.load_rules() if self.rule_store else {}
        rules = CorrectionRuleSet(overrides=overrides, extra_rules=template_rules(self.templates))
        return CardParser(
            rules=rules,
            templates=self.templates,
            min_confidence=self.min_confidence,
            context_window=self.context_window,
        )

    def process_fragments(self, fragments: Sequence[TextFragment], image_data: Optional[bytes] = None) -> Dict:
        start_time = time.time()
        record = self.build_parser().parse(fragments, image_data=image_data)
        total_time = time.time() - start_time

        logger.info(f"Parsed {len(fragments)} fragments in {total_time:.3f}s")
        return {
            "success": True,
            "contact_data": record.to_dict(),
            "fragments_count": len(fragments),
            "processing_time_ms": int(total_time * 1000),
            "processed_at": datetime.now(timezone.utc).isoformat(),
        }

    def process_texts(self, texts: Iterable[str], image_data: Optional[bytes] = None) -> Dict:
        """Parse plain strings (skip OCR), one fragment per string."""
        fragments = [TextFragment(text=t, sequence_position=i) for i, t in enumerate(texts)]
        return self.process_fragments(fragments, image_data=image_data)

    def process_text(self, text: str) -> Dict:
        return self.process_texts(text.split("\n"))

    def process_image(self, image_bytes: bytes) -> Dict:
        """
        Process a business card image.

        Args:
            image_bytes: Encoded image content

        Returns:
            Result dict; on failure `success` is False with `error` and `error_code`
        """
        start_time = time.time()
        try:
            fragments = self.recognizer.recognize(image_bytes)
        except CardRecognitionError as e:
            logger.warning(f"Recognition failed ({e.code.value}): {e}")
            return {
                "success": False,
                "error": str(e),
                "error_code": e.code.value,
            }
        logger.debug(f"Recognition: {time.time() - start_time:.2f}s")

        result = self.process_fragments(fragments, image_data=image_bytes)
        result["processing_time_ms"] = int((time.time() - start_time) * 1000)
        return result

    # ======================================================
    # STATUS
    # ======================================================

    def get_status(self) -> Dict:
        return {
            "ocr_engine": "easyocr",
            "ocr_languages": self.recognizer.languages,
            "min_confidence": self.min_confidence,
            "context_window": self.context_window,
            "templates": [t.name for t in self.templates],
            "custom_rules": len(self.rule_store.load_rules()) if self.rule_store else 0,
        }
