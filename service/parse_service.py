"""
File-facing parse service.

Resolves a caller-supplied path, guards its size, keys it by absolute path
and modification time, and runs parse + extraction through the shared
``CacheManager`` so concurrent requests for the same file parse it once.
"""

import asyncio
import logging
import os
from typing import Optional

from core.errors import (
    FactExtractorError,
    FileTooLargeError,
    InvalidArgumentError,
    SourceNotFoundError,
)
from core.startup_config import Settings
from core.structured_logging import phase_scope, request_scope
from extraction.aggregator import ParseFn, build_parse_result
from extraction.models import ParseResult
from extraction.parser import parse_source as grammar_parse_source
from extraction.parser import resolve_language
from service.cache_manager import CacheManager, content_hash

logger = logging.getLogger(__name__)


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


class ParseService:
    """One per process: owns the cache and the configured working directory."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[CacheManager] = None,
        parse_fn: ParseFn = grammar_parse_source,
    ):
        self.settings = settings or Settings()
        self.cache = cache or CacheManager(
            self.settings.cache_max_entries,
            self.settings.cache_ttl_seconds,
        )
        self._parse_fn = parse_fn

    def resolve_path(self, path: str) -> str:
        """Return the absolute path of the first existing candidate.

        Candidates are tried in order: the path as given, the path relative
        to the configured working directory, then the absolute path.

        Raises:
            SourceNotFoundError: If no candidate exists.
        """
        candidates = [
            path,
            os.path.join(self.settings.cwd, path),
            os.path.abspath(path),
        ]
        for candidate in candidates:
            if os.path.isfile(candidate):
                resolved = os.path.abspath(candidate)
                logger.debug("Resolved filepath: %s -> %s", path, resolved)
                return resolved
        raise SourceNotFoundError(f"File not found: {path}")

    def _check_size(self, path: str, size: int) -> None:
        if size > self.settings.max_file_size:
            raise FileTooLargeError(path, size, self.settings.max_file_size)

    async def _compute(self, code: str, filename: str) -> ParseResult:
        return await asyncio.to_thread(
            build_parse_result, code, filename, self._parse_fn
        )

    async def parse_file(self, path: str, request_id: Optional[str] = None) -> ParseResult:
        """Parse and extract facts from the file at ``path``.

        Log lines are tagged with ``request_id``, or a fresh ID when omitted.

        Raises:
            InvalidArgumentError: If ``path`` is empty.
            SourceNotFoundError: If the file cannot be found.
            UnsupportedKindError: If the extension is not supported.
            FileTooLargeError: If the content exceeds ``max_file_size``.
            ParseFailureError: If the grammar fails.
        """
        with request_scope(request_id):
            try:
                return await self._parse_file(path)
            except FactExtractorError as exc:
                logger.error("Failed to parse %s: %s", path, exc)
                raise

    async def _parse_file(self, path: str) -> ParseResult:
        if not isinstance(path, str) or not path:
            raise InvalidArgumentError("Invalid or missing filepath parameter")

        with phase_scope("resolve"):
            resolved = self.resolve_path(path)
            filename = os.path.basename(path)
            resolve_language(filename)
            stat_result = await asyncio.to_thread(os.stat, resolved)
            cache_key = f"{resolved}:{stat_result.st_mtime_ns / 1_000_000}"

        cached = self.cache.get(cache_key)
        if cached is not None:
            logger.info("Cache hit for: %s (%s)", path, cached.language)
            return cached

        with phase_scope("read"):
            self._check_size(path, stat_result.st_size)
            code = await asyncio.to_thread(_read_text, resolved)
            self._check_size(path, len(code.encode("utf-8")))
            logger.debug("Read file: %s (%d chars)", path, len(code))

        result = await self.cache.get_or_compute(
            cache_key, lambda: self._compute(code, filename)
        )
        logger.info("Parsed %s (%s), cache size %d", path, result.language, self.cache.size)
        return result

    async def parse_source(
        self, code: str, filename: str, request_id: Optional[str] = None
    ) -> ParseResult:
        """Parse in-memory ``code`` as if it were the file ``filename``.

        Results are cached by file name and content hash.
        """
        with request_scope(request_id):
            try:
                if not isinstance(code, str):
                    raise InvalidArgumentError("Source code must be a string")
                if not filename:
                    raise InvalidArgumentError("Invalid or missing filename parameter")
                resolve_language(filename)
                self._check_size(filename, len(code.encode("utf-8")))
                cache_key = f"{filename}:{content_hash(code)}"
                return await self.cache.get_or_compute(
                    cache_key, lambda: self._compute(code, filename)
                )
            except FactExtractorError as exc:
                logger.error("Failed to parse %s: %s", filename, exc)
                raise

    def close(self) -> None:
        self.cache.clear()
