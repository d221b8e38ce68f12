from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from .constants import (
    CONSIGNEE_ZIP_KEYS,
    DEFAULT_SHIPMENT_TYPE,
    DESTINATION_ZIP_KEYS,
    HANDLING_UNIT_KEYS,
    QUOTE_DESTINATION_ZIP_PATH,
    QUOTE_HANDLING_UNIT_PATH,
    WEIGHT_KEYS,
)
from .models import OrderRecord, ShipmentSummary
from .records import blob, normalize_record
from .utils import clean, envelopes, get_path, resolve_first

logger = logging.getLogger(__name__)

_FIELDS = ("type", "handlingUnits", "weight", "destinationZip")


def map_handling_unit_type(code: Any) -> str:
    """Rate-quote handling unit code -> shipment type."""
    value = clean(code).upper()
    if value == "PL":
        return "PALLET"
    if "SKID" in value:
        return "SKID"
    if "PIECE" in value:
        return "PIECE"
    return DEFAULT_SHIPMENT_TYPE


def _text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return clean(value) or None


def _fill(found: Dict[str, str], candidates: Dict[str, Optional[str]]) -> None:
    for key, value in candidates.items():
        if value is not None and key not in found:
            found[key] = value


def _from_quote(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    # root first, then the relay's `data` envelopes
    found: Dict[str, str] = {}
    for scope in envelopes(data):
        unit = get_path(scope, QUOTE_HANDLING_UNIT_PATH)
        if not isinstance(unit, dict):
            unit = {}
        code = _text(unit.get("type"))
        _fill(found, {
            "type": map_handling_unit_type(code) if code is not None else None,
            "handlingUnits": _text(unit.get("count")),
            "weight": _text(unit.get("weight")),
            "destinationZip": _text(get_path(scope, QUOTE_DESTINATION_ZIP_PATH)),
        })
    return found


def _from_order(data: Optional[Dict[str, Any]]) -> Dict[str, Optional[str]]:
    if data is None:
        return {}
    return {
        "handlingUnits": resolve_first(data, HANDLING_UNIT_KEYS, fuzzy=False),
        "weight": resolve_first(data, WEIGHT_KEYS, fuzzy=False),
        "destinationZip": resolve_first(data, DESTINATION_ZIP_KEYS, fuzzy=False)
        or _text(get_path(data, QUOTE_DESTINATION_ZIP_PATH)),
    }


def _from_bol(data: Optional[Dict[str, Any]]) -> Dict[str, str]:
    found: Dict[str, str] = {}
    for scope in envelopes(data):
        zip_code = _text(get_path(scope, QUOTE_DESTINATION_ZIP_PATH))
        if zip_code is None:
            zip_code = resolve_first(scope.get("consignee"), CONSIGNEE_ZIP_KEYS, fuzzy=False)
        _fill(found, {
            "destinationZip": zip_code,
            "handlingUnits": resolve_first(scope, HANDLING_UNIT_KEYS, fuzzy=False),
            "weight": resolve_first(scope, WEIGHT_KEYS, fuzzy=False),
        })
    return found


def extract_shipment_summary(record: Union[OrderRecord, Dict[str, Any]]) -> ShipmentSummary:
    """Fold shipment evidence from up to four blobs of one record.

    Sources are consulted in a fixed order and each only fills fields that
    are still empty: rate-quote request, rate-quote response, the order
    payload, then the BOL response.
    """
    if isinstance(record, dict):
        record = OrderRecord.model_validate(record)

    sources = (
        _from_quote(blob(record, "rateQuotesRequestJsonb")),
        _from_quote(blob(record, "rateQuotesResponseJsonb")),
        _from_order(blob(record, "ordersJsonb")),
        _from_bol(blob(record, "bolResponseJsonb")),
    )
    merged: Dict[str, str] = {}
    for source in sources:
        for field in _FIELDS:
            value = source.get(field)
            if value and field not in merged:
                merged[field] = value

    return ShipmentSummary(
        type=merged.get("type", DEFAULT_SHIPMENT_TYPE),
        handlingUnits=merged.get("handlingUnits", ""),
        weight=merged.get("weight", ""),
        destinationZip=merged.get("destinationZip", ""),
    )


def has_evidence(summary: ShipmentSummary) -> bool:
    return bool(summary.handlingUnits or summary.weight or summary.destinationZip)


def extract_shipment_summaries(
    records: Iterable[Union[OrderRecord, Dict[str, Any]]],
) -> List[ShipmentSummary]:
    """Batch extraction in input order; records with no evidence are dropped."""
    out: List[ShipmentSummary] = []
    for raw in records:
        record = normalize_record(raw)
        summary = extract_shipment_summary(record)
        if not has_evidence(summary):
            logger.debug("No shipment evidence on record %s", record.id)
            continue
        out.append(summary)
    return out


def to_pickup_shipments(summaries: Iterable[ShipmentSummary]) -> List[Dict[str, Optional[str]]]:
    """Shipment rows in the pickup form shape, None for empty fields."""
    return [
        {field: (getattr(summary, field) or None) for field in _FIELDS}
        for summary in summaries
    ]
