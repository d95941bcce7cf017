"""Path validation utilities for storage roots."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

ERR_ESCAPES_BASE = "path escapes storage root"
ERR_NULL_BYTES = "path contains null bytes"
ERR_EMPTY = "path is empty"


class PathValidationError(ValueError):
    """Raised when a logical storage path is invalid or unsafe."""


def resolve_within(base: str | Path, logical: str) -> Path:
    """Return the absolute filesystem path of ``logical`` below ``base``.

    Logical paths always use forward slashes, independent of the platform,
    and may carry a leading ``/``; they are interpreted relative to ``base``.

    Raises:
        PathValidationError: If ``logical`` is empty, contains null bytes or
            resolves outside of ``base`` (``..`` traversal, symlinks).
    """
    if "\x00" in logical:
        raise PathValidationError(ERR_NULL_BYTES)
    parts = [part for part in PurePosixPath(logical).parts if part != "/"]
    if not parts:
        raise PathValidationError(ERR_EMPTY)
    base_path = Path(base).resolve()
    candidate = base_path.joinpath(*parts).resolve()
    if base_path not in [candidate, *candidate.parents]:
        raise PathValidationError(ERR_ESCAPES_BASE)
    return candidate


__all__ = ["PathValidationError", "resolve_within"]
