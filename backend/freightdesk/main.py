from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, ValidationError

from .carriers import classify_carrier
from .config import get_settings
from .errors import RecordStoreError, ValidationFailure
from .estes import build_estes_bol_request
from .exporter import export_shipments_workbook
from .models import (
    CarrierResponse,
    CommodityUpdateRequest,
    EstesFormState,
    RecordSummaryResponse,
    ShipmentsResponse,
    TrackingResponse,
    XpoCommodity,
    XpoFormState,
    XpoLocation,
    XpoPickupFormState,
)
from .prefill import consignee_from_order
from .records import normalize_record
from .shipments import extract_shipment_summaries, extract_shipment_summary, has_evidence
from .store import RecordStoreClient
from .tracking import infer_tracking_number, to_lookup_params
from .xpo import build_xpo_bol_request, build_xpo_pickup_request, update_commodity

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="FreightDesk API", version="0.1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip()
                   for o in settings.cors_allowed_origins.split(",")],
    allow_origin_regex=settings.cors_allowed_origin_regex,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class Health(BaseModel):
    status: str
    env: str


@app.get("/health", response_model=Health)
def health() -> Health:
    return Health(status="ok", env=settings.app_env)


def _validation_error(e: ValidationFailure) -> HTTPException:
    return HTTPException(status_code=422, detail={"errors": e.messages})


def _store_error(e: RecordStoreError) -> HTTPException:
    if e.status == 503:
        status = 503
    elif e.status is not None and 400 <= e.status < 500:
        status = e.status
    else:
        status = 502
    headers = {"Retry-After": e.retry_after} if e.retry_after else None
    return HTTPException(status_code=status, detail=e.message, headers=headers)


# -------------------------------
# Records
# -------------------------------
@app.post("/records/normalize")
def normalize_endpoint(record: Dict[str, Any]):
    return normalize_record(record).model_dump(by_alias=True)


@app.post("/records/carrier", response_model=CarrierResponse)
def carrier_endpoint(record: Dict[str, Any]):
    return CarrierResponse(carrier=classify_carrier(normalize_record(record)))


@app.post("/records/consignee", response_model=XpoLocation)
def consignee_endpoint(record: Dict[str, Any]):
    return consignee_from_order(normalize_record(record))


@app.get("/records/{record_id}/summary", response_model=RecordSummaryResponse)
def record_summary(record_id: int):
    try:
        record = RecordStoreClient.from_settings().get_record(record_id)
    except RecordStoreError as e:
        raise _store_error(e)
    summary = extract_shipment_summary(record)
    return RecordSummaryResponse(
        id=record.id,
        carrier=classify_carrier(record),
        shipment=summary if has_evidence(summary) else None,
        tracking=infer_tracking_number(record),
    )


# -------------------------------
# Shipments
# -------------------------------
@app.post("/shipments/extract", response_model=ShipmentsResponse)
def extract_shipments(records: List[Dict[str, Any]]):
    return ShipmentsResponse(shipments=extract_shipment_summaries(records))


@app.post("/shipments/export")
def export_shipments(records: List[Dict[str, Any]]):
    try:
        wb = export_shipments_workbook(records)
        return StreamingResponse(wb, media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                                 headers={"Content-Disposition": "attachment; filename=shipments.xlsx"})
    except Exception as e:
        logger.exception("Shipments export failed")
        raise HTTPException(status_code=500, detail=str(e))


# -------------------------------
# Carrier requests
# -------------------------------
@app.post("/bol/estes")
def estes_bol(form: EstesFormState, validate: bool = True):
    try:
        return build_estes_bol_request(form, validate=validate)
    except ValidationFailure as e:
        raise _validation_error(e)


@app.post("/bol/xpo")
def xpo_bol(form: XpoFormState, validate: bool = True):
    try:
        return build_xpo_bol_request(form, validate=validate)
    except ValidationFailure as e:
        raise _validation_error(e)


@app.post("/bol/xpo/commodity", response_model=List[XpoCommodity])
def xpo_commodity(req: CommodityUpdateRequest):
    try:
        return update_commodity(req.form.commodities, req.index, req.path, req.value)
    except IndexError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))


@app.post("/pickup/xpo")
def xpo_pickup(form: XpoPickupFormState, validate: bool = True):
    try:
        return build_xpo_pickup_request(form, validate=validate)
    except ValidationFailure as e:
        raise _validation_error(e)


# -------------------------------
# Tracking
# -------------------------------
@app.post("/tracking/infer", response_model=TrackingResponse)
def tracking_infer(record: Dict[str, Any]):
    tracking = infer_tracking_number(normalize_record(record))
    return TrackingResponse(tracking=tracking, params=to_lookup_params(tracking))
