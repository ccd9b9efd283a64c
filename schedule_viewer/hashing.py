"""
Change-detection fingerprints for schedule snapshots.

Only the fields that affect what is drawn take part in the fingerprint, so
backend noise elsewhere in the payload never triggers a re-render.
"""

import hashlib
import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# Wire names of the snapshot fields that can change the rendered view
FINGERPRINT_FIELDS: tuple[str, ...] = (
    "score",
    "solverStatus",
    "employees",
    "lines",
    "dateTimes",
    "orders",
)


def canonical_json(value: Any) -> str:
    """
    Serialize a JSON-like value with object keys sorted at every level.

    Sequences keep their element order. Raises TypeError or ValueError for
    values that cannot be represented as JSON.
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def _as_mapping(snapshot: Mapping[str, Any] | BaseModel) -> Mapping[str, Any]:
    if isinstance(snapshot, BaseModel):
        return snapshot.model_dump(mode="json", by_alias=True)
    return snapshot


def _type_name(value: Any) -> str:
    # Non-JSON values are represented by their type name only
    return f"<{type(value).__name__}>"


def _fallback_json(snapshot: Any) -> str:
    try:
        return json.dumps(
            snapshot, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=_type_name
        )
    except (TypeError, ValueError):
        # Circular structures or unsortable keys
        return _type_name(snapshot)


def fingerprint(snapshot: Mapping[str, Any] | BaseModel) -> str:
    """
    Compute an order-independent fingerprint of a snapshot.

    Args:
        snapshot: Raw JSON payload or a ScheduleSnapshot model

    Returns:
        Hex digest; equal digests mean identical canonical serializations
        of score, solverStatus, employees, lines, dateTimes and orders
    """
    try:
        data = _as_mapping(snapshot)
        lightweight = {name: data.get(name) for name in FINGERPRINT_FIELDS}
        canonical = canonical_json(lightweight)
    except (TypeError, ValueError, AttributeError) as e:
        logger.debug(f"Falling back to full-snapshot fingerprint: {e}")
        canonical = _fallback_json(snapshot)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
