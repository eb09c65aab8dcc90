from __future__ import annotations

import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import BoundariesConfig, is_excluded
from .report import format_message
from .scanner import check_file


IGNORE_SUFFIXES = (".swp", ".tmp", ".bak", "~")


@dataclass
class Pending:
    last_ts: float


def should_track(path: Path, config: BoundariesConfig) -> bool:
    if any(str(path).endswith(s) for s in IGNORE_SUFFIXES):
        return False
    try:
        rel = path.resolve().relative_to(Path(config.cwd))
    except ValueError:
        return False
    if is_excluded(rel, config.exclude_dirs):
        return False
    return path.suffix.lower() in config.file_extensions


def drain_ready(pending: dict[Path, Pending], lock: threading.Lock, debounce_s: float, now: float) -> list[Path]:
    ready: list[Path] = []
    with lock:
        for p, meta in list(pending.items()):
            if now - meta.last_ts >= debounce_s:
                ready.append(p)
                pending.pop(p, None)
    return sorted(ready)


def recheck(paths: list[Path], config: BoundariesConfig) -> int:
    total = 0
    for p in paths:
        if not p.is_file():
            continue
        findings = check_file(p, config)
        total += len(findings)
        if not findings:
            print(f"[watch] ok: {p.name}")
            continue
        for f in findings:
            print(f"- {f.file}:{f.line} [{f.severity}] {format_message(f.violation)}")
    return total


def _loop(
    config: BoundariesConfig,
    pending: dict[Path, Pending],
    lock: threading.Lock,
    debounce_s: float,
    stop: threading.Event,
) -> None:
    while not stop.is_set():
        time.sleep(0.2)
        ready = drain_ready(pending, lock, debounce_s, time.time())
        if ready:
            recheck(ready, config)


class SourceChangeHandler(FileSystemEventHandler):
    def __init__(self, config: BoundariesConfig, pending: dict[Path, Pending], lock: threading.Lock) -> None:
        super().__init__()
        self.config = config
        self.pending = pending
        self.lock = lock

    def _touch(self, p: Path) -> None:
        if not should_track(p, self.config):
            return
        with self.lock:
            self.pending[p] = Pending(last_ts=time.time())

    def on_modified(self, event):  # noqa: N802
        if event.is_directory:
            return
        self._touch(Path(event.src_path))

    def on_created(self, event):  # noqa: N802
        self.on_modified(event)

    def on_moved(self, event):  # noqa: N802
        if event.is_directory:
            return
        self._touch(Path(getattr(event, "dest_path", event.src_path)))


def watch(config: BoundariesConfig, debounce_s: float) -> int:
    pending: dict[Path, Pending] = {}
    lock = threading.Lock()
    stop = threading.Event()

    observer = Observer()
    observer.schedule(SourceChangeHandler(config, pending, lock), config.cwd, recursive=True)

    thread = threading.Thread(target=_loop, args=(config, pending, lock, debounce_s, stop), daemon=True)
    thread.start()

    observer.start()
    print(f"[watch] watching: {config.cwd} (debounce={debounce_s:.2f}s)")
    try:
        while True:
            time.sleep(1.0)
    except KeyboardInterrupt:
        print("[watch] stopping...", file=sys.stderr)
    finally:
        stop.set()
        observer.stop()
    observer.join()
    return 0
