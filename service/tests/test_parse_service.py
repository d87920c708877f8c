"""Tests for the file-facing parse service."""

import asyncio
import os
import tempfile
import unittest
from unittest import mock

from core.errors import (
    FileTooLargeError,
    InvalidArgumentError,
    ParseFailureError,
    SourceNotFoundError,
    UnsupportedKindError,
)
from core.startup_config import Settings
from core.structured_logging import get_request_id
from extraction.node import SyntaxNode
from extraction.parser import ParsedSource, resolve_language
from service import parse_service as parse_service_module
from service.cache_manager import CacheManager
from service.parse_service import ParseService


class CountingParser:
    """Stand-in grammar seam that records how often it runs."""

    def __init__(self, error=None):
        self.calls = 0
        self.error = error
        self.request_ids = []

    def __call__(self, code, filename):
        self.calls += 1
        self.request_ids.append(get_request_id())
        if self.error is not None:
            raise self.error
        return ParsedSource(root=SyntaxNode("program", code), language=resolve_language(filename))


class TestParseService(unittest.IsolatedAsyncioTestCase):
    """Test file-facing parsing with caching."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = self._tmp.name
        self.parser = CountingParser()
        self.service = self._service()

    def _service(self, **overrides) -> ParseService:
        settings = Settings(cwd=self.root, **overrides)
        return ParseService(settings, parse_fn=self.parser)

    def _write(self, name: str, content: str) -> str:
        path = os.path.join(self.root, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    async def test_empty_path_rejected(self) -> None:
        """An empty path raises."""
        with self.assertRaises(InvalidArgumentError):
            await self.service.parse_file("")

    async def test_missing_file(self) -> None:
        """A missing file raises."""
        with self.assertRaises(SourceNotFoundError):
            await self.service.parse_file("nope/missing.ts")

    async def test_unsupported_kind_is_not_parsed(self) -> None:
        """An unsupported extension raises before parsing."""
        self._write("tool.py", "print('hi')\n")
        with self.assertRaises(UnsupportedKindError):
            await self.service.parse_file(os.path.join(self.root, "tool.py"))
        self.assertEqual(self.parser.calls, 0)

    async def test_too_large(self) -> None:
        """A file over the size limit raises."""
        service = self._service(max_file_size=10)
        self._write("big.ts", "const value = 'x'.repeat(100);\n")
        with self.assertRaises(FileTooLargeError):
            await service.parse_file("big.ts")
        self.assertEqual(self.parser.calls, 0)
        self.assertEqual(service.cache.size, 0)

    async def test_relative_path_resolved_against_cwd(self) -> None:
        """Relative paths resolve against the configured cwd."""
        self._write("app.ts", "export const a = 1;\n")
        result = await self.service.parse_file("app.ts")
        self.assertEqual(result.language, "typescript")

    async def test_cache_hit_skips_reading(self) -> None:
        """A cached file is not read again."""
        path = self._write("app.ts", "let a = 1;\n")
        with mock.patch.object(
            parse_service_module, "_read_text", wraps=parse_service_module._read_text
        ) as reader:
            first = await self.service.parse_file(path)
            second = await self.service.parse_file(path)

        self.assertIs(first, second)
        self.assertEqual(reader.call_count, 1)
        self.assertEqual(self.parser.calls, 1)

    async def test_concurrent_requests_parse_once(self) -> None:
        """Concurrent requests for one file parse it once."""
        path = self._write("App.vue", "<template><div/></template>\n")
        results = await asyncio.gather(*(self.service.parse_file(path) for _ in range(4)))
        self.assertEqual(self.parser.calls, 1)
        self.assertTrue(all(result is results[0] for result in results))

    async def test_modification_changes_cache_key(self) -> None:
        """Modifying a file invalidates its cache entry."""
        path = self._write("app.ts", "let a = 1;\n")
        await self.service.parse_file(path)

        self._write("app.ts", "let a = 2;\n")
        stat = os.stat(path)
        os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 5_000_000_000))
        await self.service.parse_file(path)

        self.assertEqual(self.parser.calls, 2)

    async def test_parse_failure_propagates_and_is_not_cached(self) -> None:
        """A parse failure is raised and not cached."""
        self.parser.error = ParseFailureError("grammar failed")
        path = self._write("app.ts", "let a = 1;\n")

        with self.assertRaises(ParseFailureError):
            await self.service.parse_file(path)
        self.assertEqual(self.service.cache.size, 0)
        self.assertEqual(self.service.cache.pending_count, 0)

        self.parser.error = None
        result = await self.service.parse_file(path)
        self.assertEqual(result.language, "typescript")

    async def test_parse_source_keys_by_content(self) -> None:
        """In-memory sources are cached by content."""
        await self.service.parse_source("let a = 1;", "inline.ts")
        await self.service.parse_source("let a = 1;", "inline.ts")
        await self.service.parse_source("let a = 2;", "inline.ts")
        self.assertEqual(self.parser.calls, 2)

    async def test_parse_source_rejects_unsupported_kind(self) -> None:
        """In-memory sources need a supported file name."""
        with self.assertRaises(UnsupportedKindError):
            await self.service.parse_source("x", "inline.rb")

    async def test_close_clears_cache(self) -> None:
        """close empties the cache."""
        path = self._write("app.ts", "let a = 1;\n")
        await self.service.parse_file(path)
        self.service.close()
        self.assertEqual(self.service.cache.size, 0)

    async def test_shared_cache_can_be_injected(self) -> None:
        """A cache can be supplied by the caller."""
        cache = CacheManager(max_entries=1)
        service = ParseService(Settings(cwd=self.root), cache=cache, parse_fn=self.parser)
        self.assertIs(service.cache, cache)

    async def test_request_id_reaches_parse_worker(self) -> None:
        """A caller-supplied request ID tags the work done for that file."""
        path = self._write("app.ts", "let a = 1;\n")
        await self.service.parse_file(path, request_id="run-42")
        self.assertEqual(self.parser.request_ids, ["run-42"])

        await self.service.parse_source("let b = 2;", "b.ts")
        self.assertEqual(len(self.parser.request_ids), 2)
        self.assertNotEqual(self.parser.request_ids[1], "run-42")

    async def test_real_grammar_end_to_end(self) -> None:
        """A real file is parsed with the real grammar."""
        self._write(
            "math.ts",
            "export function add(a: number, b: number): number { return a + b }\n",
        )
        service = ParseService(Settings(cwd=self.root))
        result = await service.parse_file("math.ts")

        self.assertEqual(result.functions[0].name, "add")
        self.assertEqual(result.functions[0].parameters, ("a", "b"))
        self.assertEqual(result.functions[0].return_type, "number")
        self.assertEqual(result.exports[0].kind, "function")


if __name__ == "__main__":
    unittest.main()
