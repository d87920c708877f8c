#!/usr/bin/env python3
"""
Command-line entry point: parse TypeScript, JavaScript and Vue files and print
their extracted facts as a text summary or JSON.

Usage:
    python run_parse.py src/app.ts
    python run_parse.py src/App.vue src/store.ts --json
    python run_parse.py src/app.ts --config settings.yml --report-dir output/run_reports
"""

import argparse
import asyncio
import json
import logging
import sys
import time
from typing import Any, Dict, List, Optional

from core.errors import FactExtractorError
from core.run_artifacts import build_run_report, write_run_report
from core.startup_config import ConfigValidationError, load_settings
from core.structured_logging import configure_structured_logging, set_request_id
from service.parse_service import ParseService
from service.summary import build_summary

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="TypeScript / JavaScript / Vue structural fact extraction",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_parse.py src/app.ts\n"
            "  python run_parse.py src/App.vue src/store.ts --json\n"
        ),
    )
    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Source files to parse (.ts, .tsx, .js, .jsx, .vue).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print results as JSON instead of text summaries.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional YAML settings file.",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="If set, write a JSON run report into this directory.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (DEBUG, INFO, WARNING, ...).",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=False,
        help="Fail on missing or invalid configuration instead of using defaults.",
    )
    return parser.parse_args(argv)


async def parse_files(
    service: ParseService, files: List[str], request_id: Optional[str] = None
) -> List[Dict[str, Any]]:
    """Parse every file concurrently; failures are reported per file."""
    outcomes = await asyncio.gather(
        *(service.parse_file(path, request_id=request_id) for path in files),
        return_exceptions=True,
    )
    results = []
    for path, outcome in zip(files, outcomes):
        if isinstance(outcome, FactExtractorError):
            results.append({"file": path, "error": str(outcome)})
        elif isinstance(outcome, BaseException):
            raise outcome
        else:
            results.append({"file": path, "result": outcome})
    return results


def render(results: List[Dict[str, Any]], as_json: bool) -> str:
    if as_json:
        payload = [
            {"file": item["file"], "result": item["result"].to_dict()}
            if "result" in item
            else item
            for item in results
        ]
        return json.dumps(payload, indent=2, ensure_ascii=False)

    blocks = []
    for item in results:
        if "result" in item:
            blocks.append(build_summary(item["result"], item["file"]))
        else:
            blocks.append(f"# Code Analysis: {item['file']}\n\nError: {item['error']}\n")
    return "\n".join(blocks)


def main(argv=None) -> int:
    """Main entry point. Returns the process exit code."""
    args = parse_args(argv)

    try:
        settings = load_settings(args.config, strict=args.strict_config or None)
    except ConfigValidationError as exc:
        configure_structured_logging(level=logging.INFO)
        logger.error("Configuration error: %s", exc)
        return 2

    configure_structured_logging(level=args.log_level or settings.log_level)
    run_id = set_request_id()

    service = ParseService(settings)
    t0 = time.time()
    try:
        results = asyncio.run(parse_files(service, args.files, request_id=run_id))
    except Exception as exc:
        logger.error("Parse run failed: %s", exc, exc_info=True)
        if args.report_dir:
            report = build_run_report(run_id, {}, {"*": str(exc)}, time.time() - t0)
            logger.info("Run report written: %s", write_run_report(report, args.report_dir))
        return 1
    finally:
        service.close()

    print(render(results, args.json))

    parsed = {item["file"]: item["result"].counts() for item in results if "result" in item}
    errors = {item["file"]: item["error"] for item in results if "error" in item}
    if args.report_dir:
        report = build_run_report(run_id, parsed, errors, time.time() - t0)
        logger.info("Run report written: %s", write_run_report(report, args.report_dir))

    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
