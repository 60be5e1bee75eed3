"""
Schemaless string key-value store for user preferences, persisted as JSON.
"""

import json
import logging
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional, Union


class PreferenceStore:
    """
    Persists string preferences (such as the weight unit) to a small JSON file.

    Values are read once on construction and written through on every change.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.logger = logging.getLogger("WeightGraph.Preferences")
        self._values: Dict[str, str] = self._read()

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self.logger.error("Could not read preferences from %s, starting empty: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            self.logger.warning("Preferences file %s does not hold an object, ignoring it.", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items() if v is not None}

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._values.get(key, default)

    def set(self, key: str, value: str) -> None:
        """Stores `value` under `key` and writes the file atomically."""
        if self._values.get(key) == value:
            return
        self._values[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile("w", delete=False, dir=self.path.parent, encoding="utf-8") as temp_f:
            json.dump(self._values, temp_f, indent=4)
            temp_path = temp_f.name
        shutil.move(temp_path, self.path)
        self.logger.debug("Saved preference %s=%s", key, value)
