"""Store backend writing the serialized store to a JSON file on local disk."""

from __future__ import annotations

import os
from pathlib import Path

from square_terminal.modules.profiles.exceptions import StorePersistenceError


class FileStoreRepository:
    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    async def load(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8") or None

    async def save(self, data: str) -> None:
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(data, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as exc:
            raise StorePersistenceError(f"Cannot write {self.path}: {exc}") from exc
