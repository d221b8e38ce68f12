from __future__ import annotations

import io
from typing import Any, Dict, Iterable, Union

import pandas as pd

from .carriers import classify_carrier
from .models import OrderRecord
from .records import normalize_record
from .shipments import extract_shipment_summary, has_evidence

SHIPMENTS_SHEET = "Shipments"
SHIPMENT_COLUMNS = [
    "Order ID",
    "SKU",
    "Marketplace",
    "Carrier",
    "Type",
    "Handling Units",
    "Weight",
    "Destination ZIP",
]


def shipments_frame(records: Iterable[Union[OrderRecord, Dict[str, Any]]]) -> pd.DataFrame:
    rows = []
    for raw in records:
        record = normalize_record(raw)
        summary = extract_shipment_summary(record)
        if not has_evidence(summary):
            continue
        rows.append([
            record.id,
            record.sku or "",
            record.marketplace or "",
            classify_carrier(record).value.upper(),
            summary.type,
            summary.handlingUnits,
            summary.weight,
            summary.destinationZip,
        ])
    return pd.DataFrame(rows, columns=SHIPMENT_COLUMNS)


def export_shipments_workbook(records: Iterable[Union[OrderRecord, Dict[str, Any]]]) -> io.BytesIO:
    df = shipments_frame(records)

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=SHIPMENTS_SHEET, index=False)
        ws = writer.sheets[SHIPMENTS_SHEET]
        ws.freeze_panes = "A2"
        for col, header in zip(ws.columns, SHIPMENT_COLUMNS):
            ws.column_dimensions[col[0].column_letter].width = max(12, len(header) + 2)
    out.seek(0)
    return out
