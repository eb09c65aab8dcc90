from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from .paths import is_inside_dir


@dataclass(frozen=True)
class Boundary:
    dir: str
    identifier: str
    absolute_dir: str
    alias: str | None = None
    allow_imports_from: tuple[str, ...] | None = None
    deny_imports_from: tuple[str, ...] | None = None
    allow_type_imports_from: tuple[str, ...] | None = None
    severity: str | None = None

    @property
    def has_policy(self) -> bool:
        # An empty list still counts: empty allow = deny all, empty deny = allow all.
        return (
            self.allow_imports_from is not None
            or self.deny_imports_from is not None
            or self.allow_type_imports_from is not None
        )


def identifier_of(boundary: Boundary) -> str:
    return boundary.identifier


def _nearest(path: str, candidates: Iterable[Boundary]) -> Boundary | None:
    best: Boundary | None = None
    for b in candidates:
        if not is_inside_dir(b.absolute_dir, path):
            continue
        # Strict comparison keeps the first of equal-length matches.
        if best is None or len(b.absolute_dir) > len(best.absolute_dir):
            best = b
    return best


def physical_boundary_of(path: str, boundaries: Sequence[Boundary]) -> Boundary | None:
    """Nearest boundary containing path, whether or not it declares a policy."""
    return _nearest(path, boundaries)


def policy_boundary_of(path: str, boundaries: Sequence[Boundary]) -> Boundary | None:
    """Nearest boundary containing path that declares allow/deny rules.

    Unspecified boundaries are climbed past, so a file in an unspecified child
    boundary inherits the policy of its nearest specified ancestor.
    """
    return _nearest(path, (b for b in boundaries if b.has_policy))


def alias_subpath_of(spec: str, boundaries: Sequence[Boundary]) -> Boundary | None:
    """Boundary whose alias is followed by a subpath in spec ("@domain/x" -> @domain)."""
    for b in boundaries:
        if b.alias and spec.startswith(f"{b.alias}/"):
            return b
    return None
