"""
Business card text parsing and correction engine.
"""

from .checksum import validate_taiwan_id
from .corrections import CorrectionRuleSet
from .models import CardStructure, ContactRecord, FieldCategory, PhoneType, TextFragment
from .ocr import CardRecognitionError, FragmentRecognizer, RecognitionError
from .parser import CardParser
from .pipeline import CardScanPipeline
from .rule_store import JsonRuleStore
from .templates import CardTemplate, get_templates

__all__ = [
    "CardParser",
    "CardScanPipeline",
    "CardRecognitionError",
    "CardStructure",
    "CardTemplate",
    "ContactRecord",
    "CorrectionRuleSet",
    "FieldCategory",
    "FragmentRecognizer",
    "JsonRuleStore",
    "PhoneType",
    "RecognitionError",
    "TextFragment",
    "get_templates",
    "validate_taiwan_id",
]
