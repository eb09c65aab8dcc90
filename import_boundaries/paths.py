from __future__ import annotations

import os
import posixpath
from typing import Sequence


DEFAULT_BARREL_FILE_NAME = "index"

DEFAULT_FILE_EXTENSIONS = (
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".mjs",
    ".cjs",
)


def is_inside_dir(abs_dir: str, abs_path: str) -> bool:
    """True when abs_path is abs_dir itself or lives somewhere below it."""
    try:
        rel = os.path.relpath(abs_path, abs_dir)
    except ValueError:
        # Different drives on Windows.
        return False
    if rel == ".":
        return True
    return not (rel == ".." or rel.startswith(".." + os.sep) or os.path.isabs(rel))


def has_extension(path: str, extensions: Sequence[str] | None = None) -> bool:
    ext = posixpath.splitext(posixpath.basename(path))[1]
    if not ext:
        return False
    if extensions:
        return ext in extensions
    return True


def basename_without_ext(path: str) -> str:
    base = os.path.basename(path)
    stem, _ext = os.path.splitext(base)
    return stem


def path_to_parts(relative_path: str) -> list[str]:
    if relative_path in {"", "."}:
        return []
    return [p for p in relative_path.split(os.sep) if p and p != "."]


def barrel_path(directory: str, barrel_file_name: str, file_extensions: Sequence[str]) -> str:
    return os.path.join(directory, f"{barrel_file_name}{file_extensions[0]}")


def resolve_path(base_dir: str, spec: str) -> str:
    return os.path.normpath(os.path.join(base_dir, spec))


def format_absolute_path(root_dir: str, *segments: str) -> str:
    """Forward-slash path from root_dir, e.g. ("src", "domain") -> "src/domain"."""
    joined = posixpath.normpath(posixpath.join(root_dir.replace("\\", "/"), *segments))
    return joined
