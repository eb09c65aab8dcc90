from __future__ import annotations

from .boundaries import Boundary, identifier_of
from .verdicts import BoundaryViolation


def _has_allow_list(boundary: Boundary) -> bool:
    return bool(boundary.allow_imports_from)


def _has_deny_list(boundary: Boundary) -> bool:
    return boundary.deny_imports_from is not None


def _not_allowed_reason(file_id: str, target_id: str) -> str:
    return (
        f"Cross-boundary import from '{target_id}' to '{file_id}' is not allowed. "
        f"Add '{target_id}' to 'allow_imports_from' if this import is intentional."
    )


def check_boundary_rules(
    file_boundary: Boundary,
    target_boundary: Boundary,
    is_type_only: bool = False,
) -> BoundaryViolation | None:
    """
    Decide whether file_boundary may import from target_boundary.

    Returns None when allowed. Lists match by identifier equality only.

    - allow_type_imports_from admits type-only imports before anything else.
    - deny_imports_from wins over allow_imports_from when both name the target.
    - only an allow list: everything else is denied.
    - only a deny list: everything else is allowed.
    - neither (or both, target in none): denied.
    """
    if file_boundary == target_boundary:
        return None

    file_id = identifier_of(file_boundary)
    target_id = identifier_of(target_boundary)

    if is_type_only and target_id in (file_boundary.allow_type_imports_from or ()):
        return None

    allowed = target_id in (file_boundary.allow_imports_from or ())
    if target_id in (file_boundary.deny_imports_from or ()):
        if allowed:
            reason = f"Boundary '{file_id}' explicitly denies imports from '{target_id}' (deny takes precedence over allow)"
        else:
            reason = f"Boundary '{file_id}' explicitly denies imports from '{target_id}'"
        return BoundaryViolation(from_identifier=file_id, to_identifier=target_id, reason=reason)

    if allowed:
        return None

    has_allow = _has_allow_list(file_boundary)
    has_deny = _has_deny_list(file_boundary)
    if has_deny and not has_allow:
        return None

    return BoundaryViolation(from_identifier=file_id, to_identifier=target_id, reason=_not_allowed_reason(file_id, target_id))
