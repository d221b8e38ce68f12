from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from .constants import (
    CARRIER_ALIASES,
    CARRIER_EVIDENCE,
    ORDER_CARRIER_KEYS,
    SHIPPING_COMPANY_KEYS,
)
from .models import Carrier, OrderRecord
from .records import blob
from .utils import envelopes, resolve_first

logger = logging.getLogger(__name__)


def carrier_from_value(value: Any) -> Optional[Carrier]:
    """Estes / XPO for a recognized shipping-company value, else None."""
    if not isinstance(value, str):
        return None
    alias = CARRIER_ALIASES.get(value.strip().lower())
    if alias is None:
        return None
    return Carrier(alias)


def _shipping_company(data: Optional[Dict[str, Any]], nested: bool) -> Optional[str]:
    if data is None:
        return None
    scopes = envelopes(data) if nested else [data]
    for scope in scopes:
        value = resolve_first(scope, SHIPPING_COMPANY_KEYS, fuzzy=False)
        if value is not None:
            return value
    return None


def classify_carrier(record: Union[OrderRecord, Dict[str, Any]]) -> Carrier:
    """Decide which carrier produced a stored record.

    Blobs are consulted strongest evidence first; the first shipping-company
    value found on a blob decides that step, and an unrecognized value moves
    on to the next blob. The marketplace order payload is the last resort.
    """
    if isinstance(record, dict):
        record = OrderRecord.model_validate(record)

    for field, nested in CARRIER_EVIDENCE:
        value = _shipping_company(blob(record, field), nested)
        carrier = carrier_from_value(value)
        if carrier is not None:
            logger.debug("Carrier %s decided by %s", carrier.value, field)
            return carrier

    value = resolve_first(blob(record, "ordersJsonb"), ORDER_CARRIER_KEYS, fuzzy=False)
    carrier = carrier_from_value(value)
    if carrier is not None:
        logger.debug("Carrier %s decided by ordersJsonb", carrier.value)
        return carrier
    return Carrier.UNKNOWN
