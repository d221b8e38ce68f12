from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional, Union

from .constants import JSON_FIELDS
from .models import OrderRecord

logger = logging.getLogger(__name__)


def normalize_json_field(raw: Any) -> Optional[Dict[str, Any]]:
    """Coerce one stored *Jsonb column into a dict, or None.

    The store sometimes hands back JSON-encoded strings instead of objects
    and uses null instead of omitting the key. Arrays and scalars are not
    usable blobs either.
    """
    if raw is None:
        return None
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            return None
        try:
            parsed = json.loads(text)
        except ValueError:
            logger.debug("Dropping malformed JSON field (%d chars)", len(text))
            return None
        return parsed if isinstance(parsed, dict) else None
    return None


def normalize_record(raw: Union[OrderRecord, Dict[str, Any]]) -> OrderRecord:
    """Return a new record with every JSON column normalized."""
    if isinstance(raw, OrderRecord):
        data = raw.model_dump(by_alias=True)
    else:
        data = dict(raw)
    for field in JSON_FIELDS:
        data[field] = normalize_json_field(data.get(field))
    return OrderRecord.model_validate(data)


def blob(record: OrderRecord, field: str) -> Optional[Dict[str, Any]]:
    """Normalized view of one JSON column on a record that may not have
    been through `normalize_record` yet."""
    return normalize_json_field(getattr(record, field, None))
