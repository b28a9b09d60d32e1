"""
Structural analysis: bucket every fragment under exactly one category.
"""

import logging
from typing import Sequence

from .classifiers import FieldClassifier
from .models import CardStructure, TextFragment

logger = logging.getLogger(__name__)


def analyze_structure(fragments: Sequence[TextFragment], classifier: FieldClassifier) -> CardStructure:
    """Classify each fragment and append it to its category bucket.

    Args:
        fragments: Corrected, cleaned fragments in card order
        classifier: Classifier holding the precedence list

    Returns:
        CardStructure with buckets in original sequence order
    """
    structure = CardStructure()
    for fragment in fragments:
        category = classifier.classify(fragment.text)
        structure.add(category, fragment.text, fragment.sequence_position)
        logger.debug(f"[{fragment.sequence_position}] {fragment.text!r} -> {category.value}")
    return structure
