"""
API routes for the Business Card Parsing API.

Flask REST API endpoints for scanning cards, parsing recognized text and
managing correction rules.
"""

import base64
import binascii
import logging
from typing import List, Optional

from flask import Blueprint, request, jsonify
from werkzeug.utils import secure_filename

from cardbox.models import TextFragment
from cardbox.pipeline import CardScanPipeline
from cardbox.rule_store import JsonRuleStore
from cardbox.templates import get_templates
from config import Config

logger = logging.getLogger(__name__)

# Create Blueprint
api_bp = Blueprint("api", __name__, url_prefix="/api")

# Shared instances (lazy initialization)
_pipeline: Optional[CardScanPipeline] = None
_rule_store: Optional[JsonRuleStore] = None


def get_rule_store() -> JsonRuleStore:
    global _rule_store

    if _rule_store is None:
        _rule_store = JsonRuleStore(Config.RULES_FILE, key=Config.RULES_KEY)
        logger.info(f"Rule store at {Config.RULES_FILE}")

    return _rule_store


def get_pipeline() -> CardScanPipeline:
    """Get or create pipeline instance.

    Returns:
        CardScanPipeline instance
    """
    global _pipeline

    if _pipeline is None:
        _pipeline = CardScanPipeline(
            rule_store=get_rule_store(),
            templates=get_templates(Config.TEMPLATES),
            min_confidence=Config.MIN_CONFIDENCE,
            context_window=Config.CONTEXT_WINDOW,
            ocr_languages=Config.OCR_LANGUAGES,
            ocr_gpu=Config.OCR_GPU,
        )

    return _pipeline


def allowed_file(filename: str) -> bool:
    return Config.is_allowed_file(filename)


def _error(message: str, status: int):
    return jsonify({
        "success": False,
        "error": message
    }), status


def _fragments_from_json(items: list) -> List[TextFragment]:
    """Build fragments from `[{"text", "confidence", "box"}]`.

    Raises:
        ValueError: on malformed entries
    """
    fragments = []
    for i, item in enumerate(items):
        if isinstance(item, str):
            item = {"text": item}
        if not isinstance(item, dict) or not isinstance(item.get("text"), str):
            raise ValueError(f"Fragment {i} must be an object with a 'text' string")
        fragments.append(TextFragment(
            text=item["text"],
            confidence=float(item.get("confidence", 1.0)),
            sequence_position=int(item.get("position", i)),
            bounding_box=item.get("box"),
        ))
    return fragments


@api_bp.route("/health", methods=["GET"])
def health_check():
    """Health check endpoint.

    Returns:
        JSON with health status
    """
    return jsonify({
        "success": True,
        "status": "healthy",
        "message": "Business Card Parsing API is running",
        "version": "1.0.0"
    }), 200


@api_bp.route("/status", methods=["GET"])
def get_status():
    try:
        pipeline = get_pipeline()
        status = pipeline.get_status()

        return jsonify({
            "success": True,
            "data": {
                "api_status": "running",
                "pipeline_status": status
            }
        }), 200

    except Exception as e:
        logger.error(f"Error getting status: {str(e)}")
        return _error(str(e), 500)


@api_bp.route("/process", methods=["POST"])
def process_single():
    """Scan a single business card image.

    Expects:
        - multipart/form-data with 'file' field

    Returns:
        JSON with extracted contact data
    """
    if "file" not in request.files:
        return _error("No file provided. Use 'file' field in form-data.", 400)

    file = request.files["file"]

    if file.filename == "":
        return _error("No file selected", 400)

    if not allowed_file(file.filename):
        return _error(f"File type not allowed. Allowed: {', '.join(sorted(Config.ALLOWED_EXTENSIONS))}", 400)

    try:
        image_bytes = file.read()
        logger.info(f"Processing uploaded file: {secure_filename(file.filename)} ({len(image_bytes)} bytes)")

        result = get_pipeline().process_image(image_bytes)
        if result.get("success"):
            return jsonify(result), 200
        # Unreadable or blank images are client errors
        return jsonify(result), 422

    except Exception as e:
        logger.error(f"Error processing file: {str(e)}")
        return _error(str(e), 500)


@api_bp.route("/parse", methods=["POST"])
def parse_fragments():
    """Parse recognized fragments (skip OCR).

    Expects:
        - JSON body with 'fragments' ([{"text", "confidence", "box"}]) or
          'texts' (list of strings), and optional base64 'image'

    Returns:
        JSON with parsed contact data
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not ("fragments" in data or "texts" in data):
        return _error("Send JSON with a 'fragments' or 'texts' list.", 400)

    items = data.get("fragments", data.get("texts"))
    if not isinstance(items, list):
        return _error("'fragments' / 'texts' must be a list", 400)

    image_data = None
    if data.get("image"):
        try:
            image_data = base64.b64decode(data["image"], validate=True)
        except (binascii.Error, TypeError) as e:
            return _error(f"Invalid base64 image: {e}", 400)

    try:
        fragments = _fragments_from_json(items)
    except (TypeError, ValueError) as e:
        return _error(str(e), 400)

    try:
        result = get_pipeline().process_fragments(fragments, image_data=image_data)
        return jsonify({
            "success": result["success"],
            "data": result
        }), 200

    except Exception as e:
        logger.error(f"Error parsing fragments: {str(e)}")
        return _error(str(e), 500)


@api_bp.route("/parse-text", methods=["POST"])
def parse_text():
    """Parse newline-separated card text (skip OCR).

    Expects:
        - JSON body with 'text' field

    Returns:
        JSON with parsed contact data
    """
    data = request.get_json(silent=True)

    if not data or "text" not in data or not isinstance(data["text"], str):
        return _error("No text provided. Send JSON with 'text' field.", 400)

    try:
        result = get_pipeline().process_text(data["text"])
        return jsonify({
            "success": result["success"],
            "data": result
        }), 200

    except Exception as e:
        logger.error(f"Error parsing text: {str(e)}")
        return _error(str(e), 500)


# ======================================================
# CORRECTION RULES
# ======================================================

@api_bp.route("/rules", methods=["GET"])
def list_rules():
    rules = get_rule_store().load_rules()
    return jsonify({
        "success": True,
        "data": rules,
        "count": len(rules)
    }), 200


@api_bp.route("/rules", methods=["POST"])
def add_rule():
    """Add or replace a correction override.

    Expects:
        - JSON body {"wrong": "...", "correct": "..."}
    """
    data = request.get_json(silent=True)

    if not isinstance(data, dict) or not isinstance(data.get("wrong"), str) \
            or not isinstance(data.get("correct"), str):
        return _error("Send JSON with 'wrong' and 'correct' strings.", 400)

    try:
        get_rule_store().save_rule(data["wrong"], data["correct"])
    except ValueError as e:
        return _error(str(e), 400)
    except OSError as e:
        logger.error(f"Error saving rule: {str(e)}")
        return _error(str(e), 500)

    return jsonify({
        "success": True,
        "data": {"wrong": data["wrong"], "correct": data["correct"]}
    }), 201


@api_bp.route("/rules", methods=["DELETE"])
def delete_rule():
    wrong = request.args.get("wrong", "")
    if not wrong:
        return _error("Query parameter 'wrong' is required", 400)

    if not get_rule_store().delete_rule(wrong):
        return _error(f"No rule for {wrong!r}", 404)

    return jsonify({
        "success": True,
        "data": {"deleted": wrong}
    }), 200


# Error handlers
@api_bp.errorhandler(400)
def bad_request(error):
    """Handle 400 errors."""
    return _error("Bad request", 400)


@api_bp.errorhandler(500)
def internal_error(error):
    """Handle 500 errors."""
    return _error("Internal server error", 500)
