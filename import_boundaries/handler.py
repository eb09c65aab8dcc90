from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

from .boundaries import Boundary, physical_boundary_of, policy_boundary_of
from .canonical import ALIAS_STYLE, alias_subpath_shortcut, calculate_correct_import_path
from .policy import check_boundary_rules
from .resolver import resolve_target_path
from .verdicts import Allowed, UnknownBoundary, Verdict, Violation, message_data

if TYPE_CHECKING:
    from .config import BoundariesConfig


@dataclass(frozen=True)
class FileContext:
    """Everything about the importing file that every import statement in it shares.

    Built once per file and thrown away afterwards; never shared across files.
    """

    filename: str
    file_dir: str
    boundary: Boundary | None
    policy_boundary: Boundary | None
    skip_boundary_rules: bool = False


def file_context(filename: str, boundaries: Sequence[Boundary], *, skip_boundary_rules: bool = False) -> FileContext:
    filename = os.path.realpath(filename)
    return FileContext(
        filename=filename,
        file_dir=os.path.dirname(filename),
        boundary=physical_boundary_of(filename, boundaries),
        policy_boundary=policy_boundary_of(filename, boundaries),
        skip_boundary_rules=skip_boundary_rules,
    )


def violation_severity(file: FileContext, default_severity: str | None) -> str | None:
    for b in (file.boundary, file.policy_boundary):
        if b is not None and b.severity:
            return b.severity
    return default_severity


def _report(verdict: Verdict, file: FileContext, default_severity: str | None) -> Violation:
    return Violation(verdict=verdict, severity=violation_severity(file, default_severity), data=message_data(verdict))


def handle_import(
    spec: str,
    file: FileContext,
    config: BoundariesConfig,
    *,
    is_type_only: bool = False,
) -> Violation | None:
    """
    Decide what, if anything, to report for one import statement.

    Order: external packages are skipped; a cross-boundary alias subpath is
    reported straight away; then the allow/deny policy between the file's and
    the target's policy boundaries (unless skipped); finally the canonical
    spelling. At most one violation comes back.
    """
    boundaries = config.boundaries
    target = resolve_target_path(
        spec,
        file.file_dir,
        boundaries,
        config.root_dir,
        config.cwd,
        config.barrel_file_name,
        config.file_extensions,
    )
    if target.is_external:
        return None

    if config.cross_boundary_style == ALIAS_STYLE:
        shortcut = alias_subpath_shortcut(spec, file.boundary, boundaries)
        if shortcut is not None:
            return _report(shortcut, file, config.default_severity)

    skip_rules = file.skip_boundary_rules or not config.enforce_boundaries
    importer_policy = file.policy_boundary or file.boundary
    if not skip_rules and importer_policy is not None:
        target_policy = policy_boundary_of(target.absolute_path, boundaries)
        if target_policy is None:
            target_policy = physical_boundary_of(target.absolute_path, boundaries)
        if target_policy is not None:
            denied = check_boundary_rules(importer_policy, target_policy, is_type_only)
            if denied is not None:
                return _report(denied, file, config.default_severity)

    verdict = calculate_correct_import_path(
        spec,
        file.file_dir,
        file.boundary,
        boundaries,
        config.root_dir,
        config.cwd,
        config.cross_boundary_style,
        config.barrel_file_name,
        config.file_extensions,
        target=target,
    )
    if verdict is None or isinstance(verdict, Allowed):
        return None
    if isinstance(verdict, UnknownBoundary) and config.allow_unknown_boundaries:
        return None
    return _report(verdict, file, config.default_severity)
