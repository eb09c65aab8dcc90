from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .config import BoundariesConfig, is_excluded, normalize_rel
from .handler import FileContext, file_context, handle_import
from .report import Finding


JS_IMPORT_RE = re.compile(
    r"""
    (?:
      \b(?:import|export)\s+(?P<type>type\s+)?(?:[\w*\s{},$]*\s+from\s*)? |
      \brequire\s*\(\s* |
      \bimport\s*\(\s*
    )
    (?P<quote>['"])(?P<spec>[^'"\n]+)(?P=quote)
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class ImportRef:
    spec: str
    start: int
    end: int
    line: int
    type_only: bool = False


def _line_number(text: str, idx: int) -> int:
    return text.count("\n", 0, idx) + 1


def read_source(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return None


def extract_imports(text: str) -> list[ImportRef]:
    refs: list[ImportRef] = []
    for m in JS_IMPORT_RE.finditer(text):
        spec = m.group("spec")
        if not spec.strip():
            continue
        refs.append(
            ImportRef(
                spec=spec,
                start=m.start("spec"),
                end=m.end("spec"),
                line=_line_number(text, m.start("spec")),
                type_only=m.group("type") is not None,
            )
        )
    return refs


def _rel_posix(path: Path, config: BoundariesConfig) -> str:
    try:
        return normalize_rel(path.resolve().relative_to(Path(config.cwd)))
    except ValueError:
        return normalize_rel(path)


def iter_source_files(config: BoundariesConfig, base: Path | None = None) -> list[Path]:
    root = Path(config.cwd)
    base = base or root
    out: set[Path] = set()
    for pattern in config.include_globs:
        for p in base.glob(pattern):
            if not p.is_file():
                continue
            try:
                rel = p.resolve().relative_to(root)
            except ValueError:
                rel = p
            if is_excluded(rel, config.exclude_dirs):
                continue
            out.add(p.resolve())
    return sorted(out)


def context_for(path: Path, config: BoundariesConfig) -> FileContext:
    rel = _rel_posix(path, config)
    return file_context(str(path), config.boundaries, skip_boundary_rules=config.skip_boundary_rules_for(rel))


def check_text(text: str, file: FileContext, config: BoundariesConfig, *, rel_path: str) -> list[Finding]:
    findings: list[Finding] = []
    for ref in extract_imports(text):
        violation = handle_import(ref.spec, file, config, is_type_only=ref.type_only)
        if violation is None:
            continue
        findings.append(Finding(file=rel_path, line=ref.line, spec=ref.spec, start=ref.start, end=ref.end, violation=violation))
    return findings


def check_file(path: Path, config: BoundariesConfig) -> list[Finding]:
    text = read_source(path)
    if text is None:
        return []
    # Fresh context per file: nothing carries over between files.
    file = context_for(path, config)
    return check_text(text, file, config, rel_path=_rel_posix(path, config))


def collect_files(paths: Iterable[str | Path], config: BoundariesConfig) -> list[Path]:
    files: set[Path] = set()
    for raw in paths:
        p = Path(raw)
        if not p.is_absolute():
            p = Path.cwd() / p
        if p.is_dir():
            files.update(iter_source_files(config, base=p))
        elif p.is_file():
            files.add(p.resolve())
    return sorted(files)


def check_paths(paths: Iterable[str | Path], config: BoundariesConfig) -> list[Finding]:
    findings: list[Finding] = []
    for p in collect_files(paths, config):
        findings.extend(check_file(p, config))
    return findings


def check_project(config: BoundariesConfig) -> tuple[list[Path], list[Finding]]:
    files = iter_source_files(config)
    findings: list[Finding] = []
    for p in files:
        findings.extend(check_file(p, config))
    return files, findings
