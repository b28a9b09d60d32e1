"""
EasyOCR adapter producing TextFragments for the card parser.
"""
import logging
from enum import Enum
from typing import List, Optional

from .models import TextFragment

logger = logging.getLogger(__name__)


class RecognitionError(Enum):
    IMAGE_PROCESSING_FAILED = "image_processing_failed"
    NO_TEXT_FOUND = "no_text_found"
    RECOGNITION_FAILED = "recognition_failed"


class CardRecognitionError(Exception):
    """Raised when an image cannot be turned into text fragments."""

    def __init__(self, code: RecognitionError, message: str = ""):
        super().__init__(message or code.value)
        self.code = code


class FragmentRecognizer:
    """Runs EasyOCR over card image bytes."""

    def __init__(
        self,
        languages: List[str] = None,
        gpu: bool = False,
        min_confidence: float = 0.3,
        reader=None,
    ):
        """
        Args:
            languages: EasyOCR language codes
            gpu: Use GPU for OCR
            min_confidence: Detections below this confidence are dropped
            reader: Pre-built reader exposing `readtext`; built lazily if None
        """
        self.languages = languages or ["ch_tra", "en"]
        self.gpu = gpu
        self.min_confidence = min_confidence
        self._reader = reader

    @property
    def reader(self):
        if self._reader is None:
            import easyocr

            logger.info(f"Initializing EasyOCR with languages: {self.languages}")
            try:
                self._reader = easyocr.Reader(lang_list=self.languages, gpu=self.gpu, verbose=False)
            except Exception as e:
                logger.error(f"Failed to initialize EasyOCR: {e}")
                raise CardRecognitionError(RecognitionError.RECOGNITION_FAILED, str(e)) from e
            logger.info("EasyOCR initialized successfully")
        return self._reader

    def recognize(self, image_bytes: Optional[bytes]) -> List[TextFragment]:
        """Extract text fragments from an encoded image.

        Args:
            image_bytes: PNG/JPEG/... file content

        Returns:
            Fragments ordered top-to-bottom, then left-to-right

        Raises:
            CardRecognitionError: on unreadable images, OCR failure or no text
        """
        if not image_bytes:
            raise CardRecognitionError(RecognitionError.IMAGE_PROCESSING_FAILED, "Empty image data")

        reader = self.reader
        try:
            results = reader.readtext(image_bytes, detail=1, paragraph=False)
        except (ValueError, TypeError, AttributeError) as e:
            logger.error(f"Cannot decode image: {e}")
            raise CardRecognitionError(RecognitionError.IMAGE_PROCESSING_FAILED, str(e)) from e
        except Exception as e:
            logger.error(f"OCR extraction error: {e}", exc_info=True)
            raise CardRecognitionError(RecognitionError.RECOGNITION_FAILED, str(e)) from e

        # Sort by top-left Y, then X
        results = sorted(results, key=lambda r: (r[0][0][1], r[0][0][0]))

        fragments = []
        for bbox, text, confidence in results:
            text = text.strip()
            if not text or confidence < self.min_confidence:
                continue
            fragments.append(TextFragment(
                text=text,
                confidence=float(confidence),
                sequence_position=len(fragments),
                bounding_box=[[float(x), float(y)] for x, y in bbox],
            ))

        if not fragments:
            raise CardRecognitionError(RecognitionError.NO_TEXT_FOUND, "No text extracted from image")

        logger.info(f"Recognized {len(fragments)} fragments from {len(results)} detections")
        return fragments
