"""Import boundary checks and canonical import paths for JS/TS projects."""

from __future__ import annotations

from .boundaries import Boundary, alias_subpath_of, identifier_of, physical_boundary_of, policy_boundary_of
from .canonical import calculate_correct_import_path
from .config import BoundariesConfig, ConfigError, build_config, load_config
from .handler import FileContext, file_context, handle_import
from .policy import check_boundary_rules
from .resolver import ResolvedTarget, resolve_target_path
from .verdicts import (
    ALLOWED,
    Allowed,
    AncestorBarrel,
    BoundaryViolation,
    IncorrectPath,
    UnknownBoundary,
    Verdict,
    Violation,
)

__all__ = [
    "ALLOWED",
    "Allowed",
    "AncestorBarrel",
    "BoundariesConfig",
    "Boundary",
    "BoundaryViolation",
    "ConfigError",
    "FileContext",
    "IncorrectPath",
    "ResolvedTarget",
    "UnknownBoundary",
    "Verdict",
    "Violation",
    "alias_subpath_of",
    "build_config",
    "calculate_correct_import_path",
    "check_boundary_rules",
    "file_context",
    "handle_import",
    "identifier_of",
    "load_config",
    "physical_boundary_of",
    "policy_boundary_of",
    "resolve_target_path",
]

__version__ = "0.1.0"
