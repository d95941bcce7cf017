"""Storage adapter over a writable data root and a read-only asset root.

Every operation reports failure through a sentinel (``None``, ``[]`` or
``False``) instead of raising, so callers can make a local fallback decision
without guarding each call.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from polyglot_mini.paths import PathValidationError, resolve_within
from polyglot_mini.utils import logger

DEFAULT_MAX_ASSET_BYTES = 131072  # 128 KiB


class Storage(Protocol):
    """Key-value file capability consumed by the resolution engine."""

    def read_json(self, path: str) -> Any | None:
        """Return the decoded JSON document at ``path`` or ``None``."""
        ...

    def write_json(self, path: str, data: Any) -> None:
        """Persist ``data`` as JSON at ``path``."""
        ...

    def list_dir(self, path: str) -> list[str]:
        """Return entry names below ``path`` or an empty list."""
        ...

    def asset_exists(self, path: str) -> bool:
        """Return whether the bundled asset ``path`` exists."""
        ...

    def read_asset_bounded(self, path: str, max_bytes: int) -> str | None:
        """Return at most ``max_bytes`` of the asset decoded as UTF-8."""
        ...

    def read_asset_bytes(self, path: str, max_bytes: int) -> bytes | None:
        """Return at most ``max_bytes`` raw bytes of the asset."""
        ...


class FileStorage:
    """Filesystem-backed :class:`Storage` implementation.

    ``data_dir`` holds writable state (the persisted config, synced
    translations); ``assets_dir`` holds files bundled with the application and
    is never written to.
    """

    def __init__(self, data_dir: str | Path, assets_dir: str | Path) -> None:
        """Bind the storage to its two roots."""
        self.data_dir = Path(data_dir)
        self.assets_dir = Path(assets_dir)

    def _data_path(self, path: str) -> Path | None:
        try:
            return resolve_within(self.data_dir, path)
        except PathValidationError as exc:
            logger.warning("rejected data path %r: %s", path, exc)
            return None

    def _asset_path(self, path: str) -> Path | None:
        try:
            return resolve_within(self.assets_dir, path)
        except PathValidationError as exc:
            logger.warning("rejected asset path %r: %s", path, exc)
            return None

    def read_json(self, path: str) -> Any | None:
        """Return the decoded JSON at ``path``; ``None`` when absent or corrupt."""
        target = self._data_path(path)
        if target is None or not target.is_file():
            return None
        try:
            return json.loads(target.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            logger.debug("could not read JSON from %s: %s", target, exc)
            return None

    def write_json(self, path: str, data: Any) -> None:
        """Write ``data`` to ``path``; failures are logged and swallowed."""
        target = self._data_path(path)
        if target is None:
            return
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            tmp = target.with_name(target.name + ".tmp")
            tmp.write_text(
                json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
            )
            tmp.replace(target)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning("could not write JSON to %s: %s", target, exc)

    def list_dir(self, path: str) -> list[str]:
        """Return sorted entry names below ``path`` in the data root."""
        target = self._data_path(path)
        if target is None:
            return []
        try:
            return sorted(entry.name for entry in target.iterdir())
        except OSError as exc:
            logger.debug("could not list %s: %s", target, exc)
            return []

    def asset_exists(self, path: str) -> bool:
        """Return whether ``path`` exists below the asset root."""
        target = self._asset_path(path)
        return target is not None and target.exists()

    def read_asset_bytes(self, path: str, max_bytes: int) -> bytes | None:
        """Return up to ``max_bytes`` bytes of an asset; ``None`` when unreadable.

        Files larger than ``max_bytes`` are truncated and a warning is logged.
        """
        target = self._asset_path(path)
        if target is None:
            return None
        try:
            with target.open("rb") as fh:
                data = fh.read(max_bytes + 1)
        except OSError as exc:
            logger.warning("failed to open asset file %s: %s", target, exc)
            return None
        if not data:
            logger.debug("asset file %s is empty", target)
            return None
        if len(data) > max_bytes:
            logger.warning(
                "asset file %s exceeds %d bytes and was truncated", target, max_bytes
            )
            data = data[:max_bytes]
        return data

    def read_asset_bounded(self, path: str, max_bytes: int) -> str | None:
        """Return up to ``max_bytes`` of an asset decoded as UTF-8 text."""
        data = self.read_asset_bytes(path, max_bytes)
        if data is None:
            return None
        return data.decode("utf-8", errors="replace")


__all__ = ["DEFAULT_MAX_ASSET_BYTES", "FileStorage", "Storage"]
