from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union


@dataclass(frozen=True)
class Allowed:
    kind: ClassVar[str] = "allowed"


@dataclass(frozen=True)
class IncorrectPath:
    expected: str
    actual: str
    kind: ClassVar[str] = "incorrectImportPath"


@dataclass(frozen=True)
class AncestorBarrel:
    boundary_identifier: str
    kind: ClassVar[str] = "ancestorBarrelImport"


@dataclass(frozen=True)
class UnknownBoundary:
    path: str
    kind: ClassVar[str] = "unknownBoundaryImport"


@dataclass(frozen=True)
class BoundaryViolation:
    from_identifier: str
    to_identifier: str
    reason: str
    kind: ClassVar[str] = "boundaryViolation"


Verdict = Union[Allowed, IncorrectPath, AncestorBarrel, UnknownBoundary, BoundaryViolation]

ALLOWED = Allowed()


@dataclass(frozen=True)
class Violation:
    """A reportable verdict plus the data the message templates interpolate."""

    verdict: Verdict
    severity: str | None = None
    data: dict[str, str] = field(default_factory=dict)

    @property
    def message_id(self) -> str:
        return self.verdict.kind

    @property
    def fix(self) -> str | None:
        # Only path spelling problems have a deterministic replacement.
        if isinstance(self.verdict, IncorrectPath):
            return self.verdict.expected
        return None


def message_data(verdict: Verdict) -> dict[str, str]:
    if isinstance(verdict, IncorrectPath):
        return {"expectedPath": verdict.expected, "actualPath": verdict.actual}
    if isinstance(verdict, AncestorBarrel):
        return {"boundaryIdentifier": verdict.boundary_identifier}
    if isinstance(verdict, UnknownBoundary):
        return {"path": verdict.path}
    if isinstance(verdict, BoundaryViolation):
        return {"from": verdict.from_identifier, "to": verdict.to_identifier, "reason": verdict.reason}
    return {}
