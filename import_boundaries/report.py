from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Iterable

from .verdicts import Violation


MESSAGES = {
    "incorrectImportPath": "Expected '{expectedPath}' but got '{actualPath}'.",
    "ancestorBarrelImport": (
        "Cannot import from ancestor barrel '{boundaryIdentifier}'. This would create a circular dependency. "
        "Import from the specific file or directory instead."
    ),
    "unknownBoundaryImport": (
        "Cannot import from '{path}' - path is outside all configured boundaries. "
        "Add this path to boundaries configuration or set 'allow_unknown_boundaries: true'."
    ),
    "boundaryViolation": "Cannot import from '{to}' to '{from}': {reason}",
}


def format_message(violation: Violation) -> str:
    return MESSAGES[violation.message_id].format(**violation.data)


@dataclass(frozen=True)
class Finding:
    file: str
    line: int
    spec: str
    start: int
    end: int
    violation: Violation

    @property
    def severity(self) -> str:
        # Unset severity reports like a plain rule error.
        return self.violation.severity or "error"

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "spec": self.spec,
            "message_id": self.violation.message_id,
            "severity": self.severity,
            "message": format_message(self.violation),
            "data": dict(self.violation.data),
            "fix": self.violation.fix,
        }


def apply_fixes(text: str, findings: Iterable[Finding]) -> tuple[str, int]:
    """Replace fixable specifiers in text; spans are applied last-first so offsets stay valid."""
    fixable = sorted((f for f in findings if f.violation.fix is not None), key=lambda f: f.start, reverse=True)
    applied = 0
    for f in fixable:
        if text[f.start : f.end] != f.spec:
            continue
        text = text[: f.start] + str(f.violation.fix) + text[f.end :]
        applied += 1
    return text, applied


def build_payload(findings: list[Finding], *, files_scanned: int, fixed: int = 0) -> dict[str, Any]:
    by_message: dict[str, int] = {}
    for f in findings:
        by_message[f.violation.message_id] = by_message.get(f.violation.message_id, 0) + 1
    errors = sum(1 for f in findings if f.severity == "error")
    return {
        "ok": errors == 0,
        "timestamp": time.time(),
        "stats": {
            "files_scanned": files_scanned,
            "findings": len(findings),
            "errors": errors,
            "warnings": len(findings) - errors,
            "fixed": fixed,
        },
        "by_message": [{"message_id": k, "count": v} for k, v in sorted(by_message.items(), key=lambda kv: (-kv[1], kv[0]))],
        "findings": [f.to_dict() for f in findings],
    }


def render_report_md(payload: dict[str, Any]) -> str:
    ts = payload.get("timestamp")
    ts_s = ""
    if isinstance(ts, (int, float)):
        ts_s = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime(float(ts)))

    stats = payload.get("stats") or {}
    lines: list[str] = []
    lines.append("# Import boundary findings\n")
    if ts_s:
        lines.append(f"- Generated: `{ts_s}`")
    lines.append(f"- Files scanned: `{int(stats.get('files_scanned', 0) or 0)}`")
    lines.append(f"- Findings: `{int(stats.get('findings', 0) or 0)}` (errors: `{int(stats.get('errors', 0) or 0)}`)")
    if stats.get("fixed"):
        lines.append(f"- Fixed: `{int(stats['fixed'])}`")
    lines.append("")

    by_message = payload.get("by_message")
    if isinstance(by_message, list) and by_message:
        lines.append("## By message\n")
        for r in by_message:
            lines.append(f"- `{r.get('message_id')}`: {r.get('count')}")
        lines.append("")

    findings = payload.get("findings")
    if isinstance(findings, list) and findings:
        lines.append("## Findings (top)\n")
        for f in findings[:50]:
            fix = f.get("fix")
            fix_s = f" (fix: `{fix}`)" if fix else ""
            lines.append(f"- `{f.get('file')}:{f.get('line')}` [{f.get('severity')}] {f.get('message')}{fix_s}")
        lines.append("")

    return "\n".join(lines).rstrip() + "\n"
