"""
Layout persistence.

The engine treats durability as an opaque key-value store. Two backends:
- InMemoryKeyValueStore: session-only, used by tests and embedding hosts
- JsonFileKeyValueStore: one JSON object on disk, one entry per key

Layouts are stored under a single well-known key as a versioned record.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import ValidationError

from loopdash.core.errors import ErrorContext, LayoutFormatError, PersistenceError
from loopdash.core.modes import Mode, resolve_mode
from loopdash.layout_engine.duplicates import cleanup_duplicates
from loopdash.layout_engine.types import SCHEMA_VERSION, LayoutRecord, WidgetPlacement

logger = logging.getLogger(__name__)

LEGACY_SCHEMA_VERSION = 0


# =============================================================================
# Protocol
# =============================================================================


@runtime_checkable
class KeyValueStore(Protocol):
    """String-keyed store for serialized records."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None when absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""
        ...

    def delete(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""
        ...


# =============================================================================
# Backends
# =============================================================================


class InMemoryKeyValueStore:
    """Dictionary-backed store that lives as long as the process."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileKeyValueStore:
    """Persist all keys as one JSON object file.

    Writes go to a sibling temp file first and are then swapped in, so a
    crash mid-write leaves the previous state intact.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as exc:
            raise PersistenceError(
                f"Cannot read state file: {exc}", ErrorContext(str(self.path))
            ) from exc
        if not isinstance(data, dict):
            raise PersistenceError(
                "State file must contain a JSON object", ErrorContext(str(self.path))
            )
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def _write_all(self, data: dict[str, str]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            raise PersistenceError(
                f"Cannot write state file: {exc}", ErrorContext(str(self.path))
            ) from exc

    def _read_for_write(self) -> dict[str, str]:
        """Current entries; an unreadable file counts as empty and gets replaced."""
        try:
            return self._read_all()
        except PersistenceError as exc:
            logger.warning("Overwriting unreadable state file: %s", exc)
            return {}

    def set(self, key: str, value: str) -> None:
        data = self._read_for_write()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_for_write()
        if data.pop(key, None) is not None:
            self._write_all(data)


# =============================================================================
# Record codec
# =============================================================================


def _dump_widgets(layout: Sequence[WidgetPlacement]) -> list[dict[str, Any]]:
    return [w.model_dump(by_alias=True) for w in layout]


def encode_layout(layout: Sequence[WidgetPlacement]) -> str:
    """Serialize a layout as a versioned record."""
    record = {"schema_version": SCHEMA_VERSION, "widgets": _dump_widgets(layout)}
    return json.dumps(record)


def _parse_widgets(raw: Any, key: str) -> list[WidgetPlacement]:
    if not isinstance(raw, list):
        raise LayoutFormatError("Layout widgets must be a list", ErrorContext(key))
    try:
        return [WidgetPlacement.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise LayoutFormatError(
            f"Invalid widget entry: {exc.error_count()} error(s)", ErrorContext(key)
        ) from exc


def decode_layout(raw: str, *, key: str = "layout") -> list[WidgetPlacement]:
    """
    Parse a persisted layout record.

    A bare JSON array is a record written before versioning existed; it is
    accepted and run through duplicate cleanup on the way in.

    Raises:
        LayoutFormatError: If the record is malformed or from a newer schema
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LayoutFormatError(f"Not valid JSON: {exc}", ErrorContext(key)) from exc

    if isinstance(data, list):
        widgets = _parse_widgets(data, key)
        result = cleanup_duplicates(widgets)
        logger.info(
            "Migrated legacy layout record (%d widgets, %d duplicates dropped)",
            len(widgets),
            len(result.removed),
        )
        return result.cleaned

    if not isinstance(data, dict):
        raise LayoutFormatError("Layout record must be an object", ErrorContext(key))

    version = data.get("schema_version", LEGACY_SCHEMA_VERSION)
    if not isinstance(version, int) or version > SCHEMA_VERSION:
        raise LayoutFormatError(
            f"Unsupported schema_version {version!r} (max {SCHEMA_VERSION})",
            ErrorContext(key),
        )

    widgets = _parse_widgets(data.get("widgets", []), key)
    record = LayoutRecord(schema_version=version, widgets=widgets)
    return list(record.widgets)


def encode_custom_layouts(layouts: Mapping[Mode, Sequence[WidgetPlacement]]) -> str:
    payload = {
        "schema_version": SCHEMA_VERSION,
        "modes": {str(mode): _dump_widgets(layout) for mode, layout in layouts.items()},
    }
    return json.dumps(payload)


def decode_custom_layouts(
    raw: str, *, key: str = "custom-layouts"
) -> dict[Mode, list[WidgetPlacement]]:
    """Parse the per-mode custom layout map; unknown mode names are dropped."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LayoutFormatError(f"Not valid JSON: {exc}", ErrorContext(key)) from exc

    if not isinstance(data, dict):
        raise LayoutFormatError("Custom layouts must be an object", ErrorContext(key))

    # Unversioned maps are keyed by mode directly
    modes = data.get("modes", {}) if "schema_version" in data else data
    if not isinstance(modes, dict):
        raise LayoutFormatError("Custom layout modes must be an object", ErrorContext(key))

    layouts: dict[Mode, list[WidgetPlacement]] = {}
    for name, widgets in modes.items():
        mode = resolve_mode(name)
        if mode.value != str(name).strip().lower():
            logger.warning("Dropping custom layout for unknown mode %r", name)
            continue
        layouts[mode] = cleanup_duplicates(_parse_widgets(widgets, f"{key}:{name}")).cleaned
    return layouts


__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "decode_custom_layouts",
    "decode_layout",
    "encode_custom_layouts",
    "encode_layout",
]
