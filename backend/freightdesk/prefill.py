from __future__ import annotations

from typing import Any, Dict, Optional, Union

from .constants import CONSIGNEE_SYNONYMS, ORDER_WEIGHT_SYNONYMS
from .models import OrderRecord, XpoLocation
from .records import blob
from .utils import clean, resolve_first
from .xpo import normalize_country


def _order(record: Union[OrderRecord, Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if isinstance(record, dict):
        record = OrderRecord.model_validate(record)
    return blob(record, "ordersJsonb")


def consignee_from_order(record: Union[OrderRecord, Dict[str, Any]]) -> XpoLocation:
    """Delivery location pre-filled from a marketplace order row.

    Marketplace exports name the ship-to columns differently, so each
    location field tries its header synonyms through the fuzzy resolver.
    """
    order = _order(record)
    values = {
        field: clean(resolve_first(order, synonyms, fuzzy=True))
        for field, synonyms in CONSIGNEE_SYNONYMS.items()
    }
    values["country"] = normalize_country(values["country"])
    return XpoLocation(**values)


def order_weight(record: Union[OrderRecord, Dict[str, Any]]) -> str:
    return clean(resolve_first(_order(record), ORDER_WEIGHT_SYNONYMS, fuzzy=True))
