"""Core shared contracts and utilities."""

from core.errors import (
    ExtractionFailure,
    FactExtractorError,
    FileTooLargeError,
    InvalidArgumentError,
    ParseFailureError,
    SourceNotFoundError,
    UnsupportedKindError,
)
from core.structured_logging import (
    configure_structured_logging,
    get_request_id,
    phase_scope,
    request_scope,
    set_request_id,
)
from core.startup_config import (
    ConfigValidationError,
    Settings,
    load_settings,
    load_settings_file,
    resolve_strict_config_validation,
)
from core.run_artifacts import build_run_report, write_run_report

__all__ = [
    "ExtractionFailure",
    "FactExtractorError",
    "FileTooLargeError",
    "InvalidArgumentError",
    "ParseFailureError",
    "SourceNotFoundError",
    "UnsupportedKindError",
    "configure_structured_logging",
    "get_request_id",
    "phase_scope",
    "request_scope",
    "set_request_id",
    "ConfigValidationError",
    "Settings",
    "load_settings",
    "load_settings_file",
    "resolve_strict_config_validation",
    "build_run_report",
    "write_run_report",
]
