"""Load accessibility tree snapshots written by the inspector."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from tapguard.core.exceptions import SnapshotError
from tapguard.core.logging import get_logger
from tapguard.core.schemas import ElementNode
from tapguard.observer.tree import collect_elements

log = get_logger("snapshot")


def parse_snapshot(data: Any, source: str = "<memory>") -> ElementNode:
    """
    Build the root element from decoded snapshot JSON.

    Accepts either a bare element tree or the inspector's result envelope
    (``{"success": ..., "rootElement": {...}}``).
    """
    if isinstance(data, dict) and "rootElement" in data:
        if data.get("success") is False:
            raise SnapshotError(
                f"Inspector reported failure: {data.get('error') or 'unknown error'}",
                source=source,
            )
        data = data["rootElement"]
        if data is None:
            raise SnapshotError("Inspector result has no root element", source=source)
    try:
        root = ElementNode.from_dict(data)
    except SnapshotError as e:
        e.source = source
        e.context["source"] = source
        raise
    log.debug("snapshot_parsed", source=source, elements=len(collect_elements(root)))
    return root


def load_snapshot(path: Path) -> ElementNode:
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise SnapshotError(f"Cannot read snapshot: {e}", source=str(path)) from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}", source=str(path)) from e
    except RecursionError as e:
        raise SnapshotError("Snapshot is nested too deeply to decode", source=str(path)) from e
    return parse_snapshot(data, source=str(path))
