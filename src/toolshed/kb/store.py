from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import anyio
import anyio.to_thread


logger = logging.getLogger(__name__)

DATA_UNAVAILABLE: dict[str, Any] = {"error": "Data not available"}


@dataclass(frozen=True)
class Section:
    name: str
    text: str
    # Echoed as stored; never validated against `text`.
    full_length: Any


@dataclass(frozen=True)
class KnowledgeBase:
    """Read-only view over the parsed knowledge-base document.

    `raw` is the JSON object exactly as loaded (or the sentinel error document).
    A document without a `content` mapping behaves as an empty knowledge base.
    """

    raw: dict[str, Any]

    @property
    def available(self) -> bool:
        return "error" not in self.raw

    @property
    def metadata(self) -> Any:
        return self.raw.get("metadata") or {}

    @property
    def content(self) -> dict[str, Any]:
        return _as_dict(self.raw.get("content"))

    def section_names(self) -> list[str]:
        return list(self.content.keys())

    def iter_sections(self) -> Iterator[Section]:
        for name, value in self.content.items():
            yield _section(name, value)

    def section(self, name: str) -> Section | None:
        content = self.content
        if name not in content or not content[name]:
            return None
        return _section(name, content[name])


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _section(name: str, value: Any) -> Section:
    # Sections are normally {"content": str, "full_length": int}; a bare string is its own text.
    if isinstance(value, str):
        return Section(name=name, text=value, full_length=None)
    if not isinstance(value, dict):
        return Section(name=name, text="", full_length=None)

    text = value.get("content")
    return Section(
        name=name,
        text=text if isinstance(text, str) else "",
        full_length=value.get("full_length"),
    )


class KnowledgeStore:
    """Loads the knowledge-base document once and keeps it for the process lifetime.

    Failures are cached too: a missing or unparsable file yields the sentinel
    document and is not retried. Concurrent `aload()` calls share one read.
    """

    def __init__(self, path: str | os.PathLike[str]):
        self.path = Path(path)
        self._kb: KnowledgeBase | None = None
        self._load_lock = anyio.Lock()

    @property
    def loaded(self) -> bool:
        return self._kb is not None

    def resolved_path(self) -> Path:
        return self.path if self.path.is_absolute() else Path.cwd() / self.path

    def load(self) -> KnowledgeBase:
        if self._kb is None:
            self._kb = KnowledgeBase(raw=self._read())
        return self._kb

    async def aload(self) -> KnowledgeBase:
        if self._kb is not None:
            return self._kb
        async with self._load_lock:
            if self._kb is None:
                raw = await anyio.to_thread.run_sync(self._read)
                self._kb = KnowledgeBase(raw=raw)
        return self._kb

    def _read(self) -> dict[str, Any]:
        path = self.resolved_path()
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        except (OSError, ValueError) as e:
            logger.error("Error loading knowledge base from %s: %s", path, e)
            return dict(DATA_UNAVAILABLE)

        logger.info("Loaded knowledge base from %s (%d sections)", path, len(_as_dict(data.get("content"))))
        return data
