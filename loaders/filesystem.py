"""Loader reading graph definitions from JSON files under a root directory."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from loaders.base import BaseLoader, DecisionNotFoundError, LoaderError
from models.schemas import GraphDefinition


logger = logging.getLogger(__name__)


class FilesystemLoader(BaseLoader):
    """
    Load decisions from ``<root>/<key>``.

    A key without the ``.json`` suffix also resolves to ``<root>/<key>.json``.
    With ``keep_in_memory`` the parsed definitions are memoized per key.
    """

    def __init__(self, root_path: str | Path, keep_in_memory: bool = False) -> None:
        self.root_path = Path(root_path)
        self.keep_in_memory = keep_in_memory
        self._memory: dict[str, GraphDefinition] = {}

    async def load(self, key: str) -> GraphDefinition:
        if self.keep_in_memory and key in self._memory:
            return self._memory[key]

        path = self._resolve(key)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except OSError as e:
            raise LoaderError(f"Failed to read decision file {path}: {e}", key) from e

        graph = self._parse(key, text)
        logger.debug("Loaded decision '%s' from %s", key, path)

        if self.keep_in_memory:
            self._memory[key] = graph
        return graph

    def _resolve(self, key: str) -> Path:
        """Map a key to an existing file inside the root directory."""
        root = self.root_path.resolve()
        candidates = [root / key]
        if not key.endswith(".json"):
            candidates.append(root / f"{key}.json")

        for candidate in candidates:
            resolved = candidate.resolve()
            if not resolved.is_relative_to(root):
                break
            if resolved.is_file():
                return resolved

        raise DecisionNotFoundError(
            f"Decision file not found: {self.root_path / key}", key
        )
