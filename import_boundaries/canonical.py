from __future__ import annotations

import os
from typing import Sequence

from .boundaries import Boundary, alias_subpath_of, identifier_of, physical_boundary_of
from .paths import (
    DEFAULT_BARREL_FILE_NAME,
    DEFAULT_FILE_EXTENSIONS,
    basename_without_ext,
    format_absolute_path,
    path_to_parts,
)
from .resolver import ResolvedTarget, resolve_target_path
from .verdicts import (
    ALLOWED,
    AncestorBarrel,
    IncorrectPath,
    UnknownBoundary,
    Verdict,
)


ALIAS_STYLE = "alias"
ABSOLUTE_STYLE = "absolute"


def boundary_root_spelling(boundary: Boundary, root_dir: str, style: str) -> str:
    """How another boundary refers to this one: "@domain" or "src/domain"."""
    if style == ALIAS_STYLE and boundary.alias:
        return boundary.alias
    return format_absolute_path(root_dir, boundary.dir)


def choose_path_format(boundary: Boundary, segment: str, root_dir: str, style: str) -> str:
    if style == ALIAS_STYLE and boundary.alias:
        return f"{boundary.alias}/{segment}"
    return format_absolute_path(root_dir, boundary.dir, segment)


def is_ancestor_barrel_spec(spec: str, boundary: Boundary, root_dir: str, style: str) -> bool:
    if style == ALIAS_STYLE:
        return bool(boundary.alias) and spec == boundary.alias
    root_path = format_absolute_path(root_dir, boundary.dir)
    return spec in {root_path, f"{root_path}/"}


def alias_subpath_shortcut(
    spec: str,
    file_boundary: Boundary | None,
    boundaries: Sequence[Boundary],
) -> IncorrectPath | None:
    """Cross-boundary "@alias/sub" must become the bare "@alias", whatever it points at."""
    owner = alias_subpath_of(spec, boundaries)
    if owner is None or not owner.alias:
        return None
    if file_boundary is not None and owner == file_boundary:
        return None
    return IncorrectPath(expected=owner.alias, actual=spec)


def same_boundary_path(
    target: ResolvedTarget,
    file_dir: str,
    boundary: Boundary,
    root_dir: str,
    barrel_file_name: str,
    style: str,
) -> str | AncestorBarrel:
    target_parts = path_to_parts(os.path.relpath(target.directory, boundary.absolute_dir))
    file_parts = path_to_parts(os.path.relpath(file_dir, boundary.absolute_dir))
    basename = basename_without_ext(target.absolute_path)
    is_barrel = basename == barrel_file_name

    if not target_parts:
        if is_barrel:
            return AncestorBarrel(boundary_identifier=identifier_of(boundary))
        return choose_path_format(boundary, basename, root_dir, style)

    k = 0
    while k < len(target_parts) and k < len(file_parts) and target_parts[k] == file_parts[k]:
        k += 1

    if k >= len(target_parts) and k >= len(file_parts):
        if is_barrel:
            return AncestorBarrel(boundary_identifier=identifier_of(boundary))
        return f"./{basename}"

    if k >= len(target_parts):
        # Target sits directly in a directory enclosing the importer.
        if is_barrel:
            return AncestorBarrel(boundary_identifier=identifier_of(boundary))
        target_parts = [*target_parts, basename]

    segment = target_parts[k]
    if k == len(file_parts):
        return f"./{segment}"
    if len(target_parts) == 1 and file_parts:
        return choose_path_format(boundary, segment, root_dir, style)
    if k == len(file_parts) - 1:
        return f"../{segment}"
    return choose_path_format(boundary, segment, root_dir, style)


def calculate_correct_import_path(
    spec: str,
    file_dir: str,
    file_boundary: Boundary | None,
    boundaries: Sequence[Boundary],
    root_dir: str,
    cwd: str,
    style: str = ALIAS_STYLE,
    barrel_file_name: str = DEFAULT_BARREL_FILE_NAME,
    file_extensions: Sequence[str] = DEFAULT_FILE_EXTENSIONS,
    target: ResolvedTarget | None = None,
) -> Verdict | None:
    """
    Work out the one correct spelling of an import and compare it to spec.

    file_boundary is the importer's physical boundary. Returns None for
    external packages, ALLOWED when spec is already canonical, otherwise an
    IncorrectPath, AncestorBarrel or UnknownBoundary verdict.
    """
    if target is None:
        target = resolve_target_path(spec, file_dir, boundaries, root_dir, cwd, barrel_file_name, file_extensions)
    if target.is_external:
        return None

    if style == ALIAS_STYLE:
        shortcut = alias_subpath_shortcut(spec, file_boundary, boundaries)
        if shortcut is not None:
            return shortcut

    target_boundary = physical_boundary_of(target.absolute_path, boundaries)

    if file_boundary is None or target_boundary != file_boundary:
        if target_boundary is None:
            return UnknownBoundary(path=spec)
        expected = boundary_root_spelling(target_boundary, root_dir, style)
    elif is_ancestor_barrel_spec(spec, file_boundary, root_dir, style):
        return AncestorBarrel(boundary_identifier=identifier_of(file_boundary))
    else:
        result = same_boundary_path(target, file_dir, file_boundary, root_dir, barrel_file_name, style)
        if isinstance(result, AncestorBarrel):
            return result
        expected = result

    if spec == expected:
        return ALLOWED
    return IncorrectPath(expected=expected, actual=spec)
