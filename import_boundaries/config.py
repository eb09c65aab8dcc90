from __future__ import annotations

import copy
import fnmatch
import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from jsonschema import Draft202012Validator

from .boundaries import Boundary
from .paths import DEFAULT_BARREL_FILE_NAME, DEFAULT_FILE_EXTENSIONS


DEFAULT_CONFIG_NAME = "boundaries.json"

DEFAULT_INCLUDE_GLOBS = [f"**/*{ext}" for ext in DEFAULT_FILE_EXTENSIONS]

DEFAULT_EXCLUDE_DIRS = [
    "node_modules",
    "vendor",
    ".git",
    ".venv",
    "venv",
    ".cache",
    ".idea",
    "dist",
    "build",
    "out",
    "coverage",
    ".next",
    ".nuxt",
    ".svelte-kit",
    ".turbo",
    "__pycache__",
]

_STRING_LIST = {"type": "array", "items": {"type": "string"}}
_SEVERITY = {"type": "string", "enum": ["error", "warn"]}

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "properties": {
        "root_dir": {"type": "string"},
        "boundaries": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "properties": {
                    "dir": {"type": "string", "minLength": 1},
                    "alias": {"type": "string", "minLength": 1},
                    "identifier": {"type": "string", "minLength": 1},
                    "allow_imports_from": _STRING_LIST,
                    "deny_imports_from": _STRING_LIST,
                    "allow_type_imports_from": _STRING_LIST,
                    "severity": _SEVERITY,
                },
                "required": ["dir"],
                "additionalProperties": False,
            },
        },
        "cross_boundary_style": {"type": "string", "enum": ["alias", "absolute"]},
        "default_severity": _SEVERITY,
        "allow_unknown_boundaries": {"type": "boolean"},
        "enforce_boundaries": {"type": "boolean"},
        "barrel_file_name": {"type": "string", "minLength": 1},
        "file_extensions": {
            "type": "array",
            "minItems": 1,
            "items": {"type": "string", "pattern": "^\\.[^./]+$"},
        },
        "include_globs": _STRING_LIST,
        "exclude_dirs": _STRING_LIST,
        "overrides": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "files": {**_STRING_LIST, "minItems": 1},
                    "enforce_boundaries": {"type": "boolean"},
                },
                "required": ["files"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["boundaries"],
}


BOUNDARIES_TEMPLATE = [
    {"dir": "domain", "alias": "@domain", "allow_imports_from": []},
    {"dir": "application", "alias": "@application", "allow_imports_from": ["@domain"]},
    {"dir": "infrastructure", "alias": "@infrastructure", "allow_imports_from": ["@domain", "@application"]},
]


class ConfigError(RuntimeError):
    pass


@dataclass(frozen=True)
class Override:
    files: tuple[str, ...]
    enforce_boundaries: bool | None = None


@dataclass(frozen=True)
class BoundariesConfig:
    cwd: str
    root_dir: str
    boundaries: tuple[Boundary, ...]
    cross_boundary_style: str = "alias"
    default_severity: str | None = None
    allow_unknown_boundaries: bool = False
    enforce_boundaries: bool = True
    barrel_file_name: str = DEFAULT_BARREL_FILE_NAME
    file_extensions: tuple[str, ...] = DEFAULT_FILE_EXTENSIONS
    include_globs: tuple[str, ...] = tuple(DEFAULT_INCLUDE_GLOBS)
    exclude_dirs: tuple[str, ...] = tuple(DEFAULT_EXCLUDE_DIRS)
    overrides: tuple[Override, ...] = ()

    def skip_boundary_rules_for(self, rel_posix: str) -> bool:
        enforce = self.enforce_boundaries
        for o in self.overrides:
            if o.enforce_boundaries is not None and matches_any(rel_posix, o.files):
                enforce = o.enforce_boundaries
        return not enforce


def matches_glob(rel_posix: str, glob: str) -> bool:
    if fnmatch.fnmatch(rel_posix, glob):
        return True
    # Treat "**/x" as also matching "x" at the root.
    if glob.startswith("**/") and fnmatch.fnmatch(rel_posix, glob[3:]):
        return True
    return False


def matches_any(rel_posix: str, globs: Iterable[str]) -> bool:
    return any(matches_glob(rel_posix, g) for g in globs)


def is_excluded(rel_path: Path, exclude_dirs: Iterable[str]) -> bool:
    parts = {p.lower() for p in rel_path.parts}
    return any(ex.lower() in parts for ex in exclude_dirs)


def normalize_rel(path: Path) -> str:
    return path.as_posix()


def _format_json_path(path_tokens: Iterable[Any]) -> str:
    path = "$"
    for token in path_tokens:
        if isinstance(token, int):
            path += f"[{token}]"
        else:
            path += f".{token}"
    return path


def schema_errors(data: Any, *, max_errors: int = 20) -> list[str]:
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors: list[str] = []
    for violation in sorted(
        validator.iter_errors(data),
        key=lambda item: (len(list(item.absolute_path)), _format_json_path(item.absolute_path), item.message),
    ):
        errors.append(f"schema violation at {_format_json_path(violation.absolute_path)}: {violation.message}")
        if len(errors) >= max_errors:
            errors.append(f"schema validation truncated after {max_errors} error(s).")
            break
    return errors


def _optional_list(raw: dict[str, Any], key: str) -> tuple[str, ...] | None:
    value = raw.get(key)
    if value is None:
        return None
    return tuple(str(x) for x in value)


def _build_boundary(raw: dict[str, Any], *, cwd: str, root_dir: str) -> Boundary:
    rel_dir = str(raw["dir"]).replace("\\", "/").strip("/") or "."
    alias = raw.get("alias") or None
    return Boundary(
        dir=rel_dir,
        alias=alias,
        identifier=str(raw.get("identifier") or alias or rel_dir),
        absolute_dir=os.path.normpath(os.path.join(cwd, root_dir, rel_dir)),
        allow_imports_from=_optional_list(raw, "allow_imports_from"),
        deny_imports_from=_optional_list(raw, "deny_imports_from"),
        allow_type_imports_from=_optional_list(raw, "allow_type_imports_from"),
        severity=raw.get("severity"),
    )


def build_config(data: Any, *, cwd: str | Path) -> BoundariesConfig:
    """Validate a parsed config document and resolve every boundary against cwd."""
    errors = schema_errors(data)
    if errors:
        raise ConfigError("invalid boundaries config:\n  " + "\n  ".join(errors))

    style = str(data.get("cross_boundary_style", "alias"))
    raw_boundaries: list[dict[str, Any]] = list(data["boundaries"])
    if style == "alias":
        missing = [str(b["dir"]) for b in raw_boundaries if not b.get("alias")]
        if missing:
            raise ConfigError(
                "When cross_boundary_style is 'alias', all boundaries must have an 'alias' property. "
                f"Missing aliases for: {', '.join(missing)}"
            )

    cwd_s = os.path.realpath(str(cwd))
    root_dir = str(data.get("root_dir", "src")).replace("\\", "/").rstrip("/") or "."
    boundaries = tuple(_build_boundary(b, cwd=cwd_s, root_dir=root_dir) for b in raw_boundaries)

    overrides = tuple(
        Override(files=tuple(o["files"]), enforce_boundaries=o.get("enforce_boundaries"))
        for o in data.get("overrides") or []
    )

    return BoundariesConfig(
        cwd=cwd_s,
        root_dir=root_dir,
        boundaries=boundaries,
        cross_boundary_style=style,
        default_severity=data.get("default_severity"),
        allow_unknown_boundaries=bool(data.get("allow_unknown_boundaries", False)),
        enforce_boundaries=bool(data.get("enforce_boundaries", True)),
        barrel_file_name=str(data.get("barrel_file_name", DEFAULT_BARREL_FILE_NAME)),
        file_extensions=tuple(data.get("file_extensions") or DEFAULT_FILE_EXTENSIONS),
        include_globs=tuple(data.get("include_globs") or DEFAULT_INCLUDE_GLOBS),
        exclude_dirs=tuple(data.get("exclude_dirs") or DEFAULT_EXCLUDE_DIRS),
        overrides=overrides,
    )


def read_config_data(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise ConfigError(f"missing config: {path}")
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid JSON ({path}:{e.lineno}:{e.colno}): {e.msg}")
    except OSError as e:
        raise ConfigError(f"failed to read {path}: {e}")


def load_config(path: str | Path | None = None) -> BoundariesConfig:
    cfg_path = Path(path) if path else Path.cwd() / DEFAULT_CONFIG_NAME
    data = read_config_data(cfg_path)
    return build_config(data, cwd=cfg_path.resolve().parent)


def ensure_boundaries_template(data: dict[str, Any]) -> tuple[bool, str]:
    """
    Seed starter boundaries into a config document.

    - Idempotent: repeated calls do not duplicate boundaries.
    - Non-destructive: an existing non-empty boundaries list is preserved.
    """
    boundaries = data.get("boundaries")
    if isinstance(boundaries, list) and boundaries:
        return False, "boundaries already configured; leaving existing entries unchanged"

    data.setdefault("root_dir", "src")
    data.setdefault("cross_boundary_style", "alias")
    data["boundaries"] = copy.deepcopy(BOUNDARIES_TEMPLATE)
    return True, f"added {len(BOUNDARIES_TEMPLATE)} starter boundaries"
