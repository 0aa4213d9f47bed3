"""File store with freshness metadata.

Two tiers:
  - raw/: Source files as downloaded or imported (spawn index CSV), 30-day TTL
  - derived/: Computed outputs, always rebuilt (predictions JSON, HTML site)

JSON outputs are wrapped in a ``{"meta": ..., "data": ...}`` envelope.
Non-JSON files (the CSV) keep their native format with a sidecar
``<name>.meta.json`` holding the same metadata, so ``is_fresh`` works for
both.
"""

from __future__ import annotations

import json
import shutil
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 (used at runtime)
from typing import Any


class DataStore:
    """Reads and writes store files under a base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.raw = base_dir / "raw"
        self.derived = base_dir / "derived"

    # -------------------------------------------------------------------------
    # JSON envelopes
    # -------------------------------------------------------------------------

    def read(self, path: Path) -> Any:
        """Return the ``data`` payload of an enveloped JSON file, or None if missing."""
        envelope = self.read_raw(path)
        if envelope is None:
            return None
        return envelope.get("data", envelope)

    def read_raw(self, path: Path) -> dict[str, Any] | None:
        """Return the full envelope (meta + data), or None if missing."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open(encoding="utf-8") as f:
            envelope: dict[str, Any] = json.load(f)
        return envelope

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write ``data`` wrapped in a metadata envelope.

        Args:
            path: Relative path under the base dir (e.g. ``derived/predictions.json``).
            data: JSON-compatible payload stored under ``data``.
            source: Where the data came from.
            valid_until: Expiry timestamp; None for derived outputs.
            **params: Extra metadata fields (target year, report counts, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._prepare(path)
        envelope = {"meta": self._meta(source, valid_until, params), "data": data}
        with full.open("w", encoding="utf-8") as f:
            json.dump(envelope, f, indent=2)
        return full

    # -------------------------------------------------------------------------
    # Native files with sidecar metadata
    # -------------------------------------------------------------------------

    def write_text(
        self,
        path: Path,
        text: str,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Store text (e.g. a downloaded CSV) verbatim with sidecar metadata."""
        full = self._prepare(path)
        full.write_text(text, encoding="utf-8")
        self._write_sidecar(full, self._meta(source, valid_until, params))
        return full

    def write_file(
        self,
        path: Path,
        src: Path,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Copy an existing file into the store with sidecar metadata."""
        full = self._prepare(path)
        shutil.copy2(src, full)
        self._write_sidecar(full, self._meta(source, valid_until, params))
        return full

    def file_path(self, path: Path) -> Path | None:
        """Absolute path of a stored file, or None if missing."""
        full = self._resolve(path)
        return full if full.exists() else None

    def metadata(self, path: Path) -> dict[str, Any]:
        """Metadata for a stored file, from its sidecar or its JSON envelope."""
        full = self._resolve(path)
        sidecar = self._sidecar(full)
        if sidecar.exists():
            with sidecar.open(encoding="utf-8") as f:
                meta: dict[str, Any] = json.load(f).get("meta", {})
            return meta
        if full.suffix == ".json" and full.exists():
            envelope = self.read_raw(path) or {}
            return envelope.get("meta", {})
        return {}

    def is_fresh(self, path: Path) -> bool:
        """True if the file exists and its ``valid_until`` has not passed."""
        full = self._resolve(path)
        if not full.exists():
            return False

        valid_until = self.metadata(path).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _meta(source: str, valid_until: datetime | None, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)
        return meta

    @staticmethod
    def _sidecar(full: Path) -> Path:
        return full.with_suffix(full.suffix + ".meta.json")

    def _write_sidecar(self, full: Path, meta: dict[str, Any]) -> None:
        with self._sidecar(full).open("w", encoding="utf-8") as f:
            json.dump({"meta": meta}, f, indent=2)

    def _prepare(self, path: Path) -> Path:
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        return full

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full
