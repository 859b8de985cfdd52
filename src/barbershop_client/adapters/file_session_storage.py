"""JSON-file session storage."""

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from barbershop_client.services.session_store import SessionStorage

logger = logging.getLogger(__name__)


@dataclass
class JsonFileSessionStorage(SessionStorage):
    """Stores session keys in one JSON document, replaced atomically on write."""

    path: Path

    @classmethod
    def create(cls, path: str) -> "JsonFileSessionStorage":
        """Create storage for a path, expanding the user directory."""
        return cls(path=Path(path).expanduser())

    @classmethod
    def for_visitor(cls, directory: str, visitor_id: str) -> "JsonFileSessionStorage":
        """Create the session file of one visitor inside `directory`."""
        return cls.create(str(Path(directory) / f"{visitor_id}.json"))

    def read(self) -> dict[str, object]:
        """Return stored keys; a missing or corrupt file reads as empty."""
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning(
                "Ignoring unreadable session file",
                extra={"path": str(self.path), "error": type(exc).__name__},
            )
            return {}
        return data if isinstance(data, dict) else {}

    def write(self, values: dict[str, object]) -> None:
        """Merge keys into the document."""
        data = self.read()
        data.update(values)
        self._replace(data)

    def remove(self, keys: list[str]) -> None:
        """Delete keys; the file is removed once it holds nothing."""
        data = self.read()
        for key in keys:
            data.pop(key, None)
        if data:
            self._replace(data)
        else:
            self.path.unlink(missing_ok=True)

    def _replace(self, data: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
