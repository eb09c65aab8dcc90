from __future__ import annotations

import os
import posixpath
from dataclasses import dataclass
from typing import Sequence

from .boundaries import Boundary
from .paths import (
    DEFAULT_BARREL_FILE_NAME,
    DEFAULT_FILE_EXTENSIONS,
    barrel_path,
    has_extension,
    resolve_path,
)


@dataclass(frozen=True)
class ResolvedTarget:
    absolute_path: str
    directory: str

    @property
    def is_external(self) -> bool:
        return not self.absolute_path


EXTERNAL = ResolvedTarget(absolute_path="", directory="")


def resolve_target(
    base_dir: str,
    spec: str,
    barrel_file_name: str,
    file_extensions: Sequence[str],
) -> ResolvedTarget:
    """Resolve spec against base_dir; extensionless specs are directories with a barrel file."""
    if not spec:
        return ResolvedTarget(absolute_path=barrel_path(base_dir, barrel_file_name, file_extensions), directory=base_dir)
    if not has_extension(spec, file_extensions):
        directory = resolve_path(base_dir, spec)
        return ResolvedTarget(absolute_path=barrel_path(directory, barrel_file_name, file_extensions), directory=directory)
    absolute_path = resolve_path(base_dir, spec)
    return ResolvedTarget(absolute_path=absolute_path, directory=os.path.dirname(absolute_path))


def resolve_alias_import(
    spec: str,
    boundaries: Sequence[Boundary],
    barrel_file_name: str,
    file_extensions: Sequence[str],
) -> ResolvedTarget:
    for b in boundaries:
        if not b.alias:
            continue
        if spec == b.alias or spec.startswith(f"{b.alias}/"):
            subpath = spec[len(b.alias) + 1 :]
            return resolve_target(b.absolute_dir, subpath, barrel_file_name, file_extensions)
    # Scoped npm package (@scope/pkg).
    return EXTERNAL


def resolve_relative_import(
    spec: str,
    file_dir: str,
    barrel_file_name: str,
    file_extensions: Sequence[str],
) -> ResolvedTarget:
    if not has_extension(spec, file_extensions) and posixpath.basename(spec) == barrel_file_name:
        # "./index" or "../index": the barrel of the directory holding it.
        directory = resolve_path(file_dir, posixpath.dirname(spec) or ".")
        return ResolvedTarget(absolute_path=barrel_path(directory, barrel_file_name, file_extensions), directory=directory)
    return resolve_target(file_dir, spec, barrel_file_name, file_extensions)


def resolve_absolute_import(
    spec: str,
    cwd: str,
    barrel_file_name: str,
    file_extensions: Sequence[str],
) -> ResolvedTarget:
    return resolve_target(cwd, spec, barrel_file_name, file_extensions)


def _dir_suffixes(boundary_dir: str) -> list[str]:
    parts = boundary_dir.split("/")
    # Shortest trailing slice first: "a/b/c" -> ["c", "b/c", "a/b/c"].
    return ["/".join(parts[i:]) for i in range(len(parts) - 1, -1, -1)]


def match_bare_boundary(spec: str, boundaries: Sequence[Boundary]) -> Boundary | None:
    """First boundary whose dir (or a trailing slice of it) prefixes a bare specifier."""
    for b in boundaries:
        if spec == b.dir or spec.startswith(f"{b.dir}/"):
            return b
        if not spec or not b.dir:
            continue
        for suffix in _dir_suffixes(b.dir):
            if spec == suffix or spec.startswith(f"{suffix}/"):
                return b
    return None


def bare_import_subpath(spec: str, boundary: Boundary) -> str:
    if spec == boundary.dir:
        return ""
    if spec.startswith(f"{boundary.dir}/"):
        return spec[len(boundary.dir) + 1 :]
    for suffix in _dir_suffixes(boundary.dir):
        if spec.startswith(f"{suffix}/"):
            return spec[len(suffix) + 1 :]
        if spec == suffix:
            return ""
    return ""


def resolve_bare_import(
    spec: str,
    boundaries: Sequence[Boundary],
    barrel_file_name: str,
    file_extensions: Sequence[str],
) -> ResolvedTarget:
    boundary = match_bare_boundary(spec, boundaries)
    if boundary is None:
        return EXTERNAL
    subpath = bare_import_subpath(spec, boundary)
    return resolve_target(boundary.absolute_dir, subpath, barrel_file_name, file_extensions)


def is_root_relative(spec: str, root_dir: str) -> bool:
    prefix = root_dir.replace("\\", "/").rstrip("/")
    if prefix in {"", "."}:
        return False
    return spec == prefix or spec.startswith(f"{prefix}/")


def resolve_target_path(
    spec: str,
    file_dir: str,
    boundaries: Sequence[Boundary],
    root_dir: str,
    cwd: str,
    barrel_file_name: str = DEFAULT_BARREL_FILE_NAME,
    file_extensions: Sequence[str] = DEFAULT_FILE_EXTENSIONS,
) -> ResolvedTarget:
    """Classify a raw import specifier and resolve its target file and directory.

    Alias (``@domain/x``), relative (``./x``), root-relative (``src/domain/x``)
    and bare (``domain/x`` or a trailing slice like ``entities/army``) specifiers
    resolve to a target; anything else is an external package and comes back as
    ``EXTERNAL``.
    """
    if spec.startswith("@"):
        return resolve_alias_import(spec, boundaries, barrel_file_name, file_extensions)
    if spec.startswith("."):
        return resolve_relative_import(spec, file_dir, barrel_file_name, file_extensions)
    if is_root_relative(spec, root_dir):
        return resolve_absolute_import(spec, cwd, barrel_file_name, file_extensions)
    return resolve_bare_import(spec, boundaries, barrel_file_name, file_extensions)
