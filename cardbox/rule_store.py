"""
Persistence for user-defined correction rules.

Rules live in a JSON key-value file under a single key, as a
wrong -> correct mapping.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Union

logger = logging.getLogger(__name__)

DEFAULT_KEY = "CustomOCRRules"


class JsonRuleStore:
    """JSON file holding the correction overrides."""

    def __init__(self, path: Union[str, Path], key: str = DEFAULT_KEY):
        self.path = Path(path)
        self.key = key

    def _read(self) -> Dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable rule file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

    def load_rules(self) -> Dict[str, str]:
        rules = self._read().get(self.key, {})
        if not isinstance(rules, dict):
            logger.warning(f"Rule key {self.key} is not a mapping, ignoring it")
            return {}
        return {str(k): str(v) for k, v in rules.items()}

    def save_rule(self, wrong: str, correct: str) -> None:
        """Add or replace one override.

        Raises:
            ValueError: if `wrong` is empty
        """
        if not wrong:
            raise ValueError("Rule 'wrong' text must not be empty")
        data = self._read()
        rules = data.get(self.key)
        if not isinstance(rules, dict):
            rules = {}
        rules[wrong] = correct
        data[self.key] = rules
        self._write(data)
        logger.info(f"Saved correction rule {wrong!r} -> {correct!r}")

    def delete_rule(self, wrong: str) -> bool:
        data = self._read()
        rules = data.get(self.key)
        if not isinstance(rules, dict) or wrong not in rules:
            return False
        del rules[wrong]
        self._write(data)
        logger.info(f"Deleted correction rule {wrong!r}")
        return True
