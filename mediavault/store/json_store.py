import copy
import json
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from mediavault.core.errors import StoreCorrupted


class JsonDocument:
    """A JSON file that is always read whole and rewritten whole.

    Writes land in a sibling ``.tmp`` file that is swapped in with ``os.replace``.
    The lock only serialises writers inside this process; separate processes
    sharing the file still race and the last writer wins.
    """

    def __init__(self, path: str | Path, default: Any) -> None:
        self.path = Path(path)
        self._default = default
        self._lock = threading.RLock()

    def ensure(self) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self.write(self._default)

    def read(self) -> Any:
        with self._lock:
            return self._load()

    def write(self, data: Any) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_name(f"{self.path.name}.tmp")
            with tmp.open("w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False, indent=2)
            os.replace(tmp, self.path)

    @contextmanager
    def transaction(self) -> Iterator[Any]:
        """Yield the current document and write it back if the block exits cleanly."""
        with self._lock:
            data = self._load()
            yield data
            self.write(data)

    def _load(self) -> Any:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return copy.deepcopy(self._default)
        try:
            return json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreCorrupted(f"{self.path.name} is not valid JSON") from exc
