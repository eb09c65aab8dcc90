from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from .config import DEFAULT_CONFIG_NAME, ConfigError, ensure_boundaries_template, load_config
from .report import apply_fixes, build_payload, format_message, render_report_md
from .scanner import check_file, collect_files, iter_source_files, read_source


def _write_reports(payload: dict[str, Any], out: str | None, md_out: str | None) -> None:
    if out:
        out_path = Path(out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        print(f"[boundaries] wrote: {out_path}")
    if md_out:
        md_path = Path(md_out)
        md_path.parent.mkdir(parents=True, exist_ok=True)
        md_path.write_text(render_report_md(payload), encoding="utf-8")
        print(f"[boundaries] wrote: {md_path}")


def _cmd_check(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    files = collect_files(args.paths, cfg) if args.paths else iter_source_files(cfg)

    findings = []
    fixed = 0
    for p in files:
        file_findings = check_file(p, cfg)
        if args.fix and any(f.violation.fix for f in file_findings):
            text = read_source(p)
            if text is not None:
                new_text, applied = apply_fixes(text, file_findings)
                if applied:
                    p.write_text(new_text, encoding="utf-8")
                    fixed += applied
                    # Re-check so only what is left gets reported.
                    file_findings = check_file(p, cfg)
        findings.extend(file_findings)

    payload = build_payload(findings, files_scanned=len(files), fixed=fixed)
    _write_reports(payload, args.out, args.md_out)

    if fixed:
        print(f"[boundaries] fixed: {fixed}")
    if findings:
        shown = findings[: max(0, int(args.max_findings))]
        print(f"[boundaries] findings={len(findings)} (showing top {len(shown)})")
        for f in shown:
            print(f"- {f.file}:{f.line} [{f.severity}] {format_message(f.violation)}")
    else:
        print(f"[boundaries] ok: no findings ({len(files)} files)")

    if findings and args.strict:
        return 1
    return 0 if payload["ok"] else 1


def _cmd_init(args: argparse.Namespace) -> int:
    cfg_path = Path(args.config or DEFAULT_CONFIG_NAME)
    data: Any = {}
    if cfg_path.exists():
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            print(f"[boundaries] invalid JSON in {cfg_path}: {e}", file=sys.stderr)
            return 2
        except OSError as e:
            print(f"[boundaries] failed to read {cfg_path}: {e}", file=sys.stderr)
            return 2
        if not isinstance(data, dict):
            print(f"[boundaries] invalid config root (expected object): {cfg_path}", file=sys.stderr)
            return 2

    changed, reason = ensure_boundaries_template(data)
    if changed:
        try:
            cfg_path.parent.mkdir(parents=True, exist_ok=True)
            cfg_path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            print(f"[boundaries] failed to write {cfg_path}: {e}", file=sys.stderr)
            return 2
        print(f"[boundaries] initialized starter template in {cfg_path}")
    else:
        print(f"[boundaries] template unchanged: {reason}")
    return 0


def _cmd_watch(args: argparse.Namespace) -> int:
    from .watcher import watch

    cfg = load_config(args.config)
    debounce_s = max(0.3, min(1.0, args.debounce_ms / 1000.0))
    return watch(cfg, debounce_s)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="import-boundaries",
        description="Enforce import boundaries and canonical import paths in JS/TS sources.",
    )
    sub = ap.add_subparsers(dest="command")

    check = sub.add_parser("check", help="Check sources (default command).")
    check.add_argument("paths", nargs="*", help="Files or directories (default: whole project).")
    check.add_argument("--config", default=None, help=f"Config file (default: ./{DEFAULT_CONFIG_NAME}).")
    check.add_argument("--fix", action="store_true", help="Rewrite fixable import paths in place.")
    check.add_argument("--strict", action="store_true", help="Fail on warnings too.")
    check.add_argument("--out", default=None, help="Write a JSON report here.")
    check.add_argument("--md-out", default=None, help="Write a Markdown report here.")
    check.add_argument("--max-findings", type=int, default=50)
    check.set_defaults(func=_cmd_check)

    init = sub.add_parser("init", help="Create or seed a starter boundaries config.")
    init.add_argument("--config", default=None)
    init.set_defaults(func=_cmd_init)

    watch = sub.add_parser("watch", help="Re-check files as they change.")
    watch.add_argument("--config", default=None)
    watch.add_argument("--debounce-ms", type=int, default=400)
    watch.set_defaults(func=_cmd_watch)
    return ap


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv or argv[0] not in {"check", "init", "watch", "-h", "--help"}:
        argv = ["check", *argv]
    args = build_parser().parse_args(argv)
    try:
        return int(args.func(args))
    except ConfigError as e:
        print(f"[boundaries] config error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
