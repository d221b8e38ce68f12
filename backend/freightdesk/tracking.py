from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from .constants import PRO_LENGTH, TRACKING_PROBES
from .models import OrderRecord, TrackingLookupParams, TrackingNumber
from .records import blob
from .utils import resolve_value

logger = logging.getLogger(__name__)


def _is_pro(value: str) -> bool:
    return len(value) == PRO_LENGTH and value.isascii() and value.isdigit()


def infer_tracking_number(record: Union[OrderRecord, Dict[str, Any]]) -> Optional[TrackingNumber]:
    """Pick the tracking number a status lookup should start from.

    Kinds are tried in a fixed order and the first hit wins. A PRO candidate
    must be exactly ten digits; anything else falls through to the next key.
    """
    if isinstance(record, dict):
        record = OrderRecord.model_validate(record)

    for kind, fields, keys in TRACKING_PROBES:
        for field in fields:
            data = blob(record, field)
            for key in keys:
                value = resolve_value(data, key, fuzzy=False)
                if value is None:
                    continue
                value = value.strip()
                if kind == "pro":
                    if not _is_pro(value):
                        logger.debug("Rejected PRO candidate %s in %s (%d chars)", key, field, len(value))
                        continue
                elif not value:
                    continue
                return TrackingNumber(kind=kind, value=value)
    return None


def to_lookup_params(tracking: Optional[TrackingNumber]) -> TrackingLookupParams:
    if tracking is None:
        return TrackingLookupParams()
    return TrackingLookupParams(**{tracking.kind: tracking.value})
