"""Plan storage: generated, uploaded and optimized plan texts.

- in-memory for fast path
- persisted on disk so plans survive a server reload/restart
"""

from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

_plan_store: dict[str, dict[str, Any]] = {}

_BACKEND_DIR = Path(__file__).resolve().parents[3]  # backend/
_DEFAULT_DATA_DIR = _BACKEND_DIR / ".data"


def _plans_dir() -> Path:
    # PLANWISE_DATA_DIR is resolved per call, default backend/.data
    data_dir = (os.environ.get("PLANWISE_DATA_DIR") or "").strip()
    return Path(data_dir or _DEFAULT_DATA_DIR) / "plans"


def _persist_plan(plan_id: str, record: dict[str, Any]) -> None:
    plans_dir = _plans_dir()
    plans_dir.mkdir(parents=True, exist_ok=True)
    path = plans_dir / f"{plan_id}.json"
    path.write_text(json.dumps(record, ensure_ascii=False), encoding="utf-8")


def _load_plan_from_disk(plan_id: str) -> dict[str, Any] | None:
    path = _plans_dir() / f"{plan_id}.json"
    if not path.exists():
        return None
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read stored plan %s: %s", plan_id, e)
        return None


def save_plan(
    text: str | bytes,
    source: str = "generated",
    request: dict[str, Any] | None = None,
    parent_id: str | None = None,
    marker_style: str | None = None,
) -> dict[str, Any]:
    """Store plan text and return the record (with `plan_id`).

    source: "generated" | "uploaded" | "optimized"
    marker_style: line convention the text was written in; None means the configured default
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            text = text.decode("utf-8", errors="replace")
    plan_id = uuid.uuid4().hex
    record: dict[str, Any] = {
        "plan_id": plan_id,
        "text": text,
        "source": source,
        "request": request,
        "parent_id": parent_id,
        "marker_style": marker_style,
    }
    _plan_store[plan_id] = record
    _persist_plan(plan_id, record)
    logger.info("Stored %s plan %s (%d chars)", source, plan_id, len(text))
    return record


def get_plan(plan_id: str) -> dict[str, Any] | None:
    """Retrieve a stored plan by id."""
    if not plan_id.isalnum():
        return None
    rec = _plan_store.get(plan_id)
    if rec is not None:
        return rec
    rec = _load_plan_from_disk(plan_id)
    if rec is not None:
        _plan_store[plan_id] = rec
    return rec
