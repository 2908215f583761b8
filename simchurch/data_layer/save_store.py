"""
JSON save slots.
Each slot is one `<slot>.json` file holding the whole game state as-is.
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import get_settings

logger = logging.getLogger(__name__)

SLOT_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+$")


class SaveStore:
    """Reads and writes save slots in one directory."""

    def __init__(self, save_dir: Optional[Path] = None):
        self.save_dir = Path(save_dir) if save_dir is not None else get_settings().paths.save_dir

    def _path(self, slot: str) -> Optional[Path]:
        if not SLOT_PATTERN.match(slot or ""):
            logger.warning("Invalid save slot name: %r", slot)
            return None
        return self.save_dir / f"{slot}.json"

    def save(self, slot: str, payload: Dict[str, Any]) -> bool:
        path = self._path(slot)
        if path is None:
            return False
        try:
            self.save_dir.mkdir(parents=True, exist_ok=True)
            tmp_path = path.with_suffix(".json.tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            tmp_path.replace(path)
        except (OSError, TypeError, ValueError) as e:
            logger.warning("Failed to save slot %s: %s", slot, e)
            return False
        logger.info("Saved slot %s -> %s", slot, path)
        return True

    def load(self, slot: str) -> Optional[Dict[str, Any]]:
        """Slot payload, or None when missing or unreadable."""
        path = self._path(slot)
        if path is None or not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Failed to read slot %s: %s", slot, e)
            return None
        if not isinstance(data, dict):
            logger.warning("Slot %s does not hold a game state object", slot)
            return None
        return data

    def exists(self, slot: str) -> bool:
        path = self._path(slot)
        return path is not None and path.exists()

    def delete(self, slot: str) -> bool:
        path = self._path(slot)
        if path is None or not path.exists():
            return False
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Failed to delete slot %s: %s", slot, e)
            return False
        return True

    def list_slots(self) -> List[str]:
        if not self.save_dir.exists():
            return []
        return sorted(p.stem for p in self.save_dir.glob("*.json"))
