"""High-score persistence."""

from __future__ import annotations

import json
import operator
import os
import tempfile
from pathlib import Path
from typing import Union

NAMESPACE = "AstroLib"
HIGH_SCORE_KEY = "highScore"


class MemoryStore:
    """Keeps the high score in memory only."""

    def __init__(self, value: int = 0) -> None:
        self._value = operator.index(value)

    def load(self) -> int:
        return self._value

    def save(self, value: int) -> None:
        self._value = operator.index(value)


class HighScoreStore:
    """Keeps the high score in a JSON file under the game's namespace.

    A missing or unreadable file reads as a high score of 0.
    """

    def __init__(self, path: Union[str, os.PathLike]) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> int:
        section = self._read().get(NAMESPACE)
        if not isinstance(section, dict):
            return 0
        value = section.get(HIGH_SCORE_KEY, 0)
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value

    def save(self, value: int) -> None:
        value = operator.index(value)
        data = self._read()
        section = data.get(NAMESPACE)
        if not isinstance(section, dict):
            section = {}
        section[HIGH_SCORE_KEY] = value
        data[NAMESPACE] = section

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise