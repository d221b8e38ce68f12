from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

import requests

from .config import get_settings
from .constants import JSON_FIELDS, RECORDS_MAX_PAGE_SIZE, RECORDS_MAX_PAGES, RECORDS_PATH
from .errors import RecordStoreError
from .models import OrderRecord, Pagination
from .records import normalize_record

logger = logging.getLogger(__name__)

# Scalar columns sent alongside the JSON blobs on create/update
_FORM_FIELDS = ("sku", "orderOnMarketPlace", "status")


def _retry_after(value: Optional[str]) -> Optional[str]:
    """Retry-After as an ISO timestamp when given in seconds, else as sent."""
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return value
    return (datetime.now(timezone.utc) + timedelta(seconds=seconds)).isoformat()


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Record store request failed: {resp.status_code} {resp.reason or ''}".strip()


def _unwrap(body: Any) -> Any:
    if isinstance(body, dict):
        for key in ("data", "order"):
            if isinstance(body.get(key), dict):
                inner = body[key]
                if key == "data" and isinstance(inner.get("data"), dict):
                    return inner["data"]
                return inner
    return body


def _form_fields(payload: Union[OrderRecord, Dict[str, Any]]) -> Dict[str, str]:
    if isinstance(payload, OrderRecord):
        payload = payload.model_dump(by_alias=True, exclude_none=True)
    fields: Dict[str, str] = {}
    for key in _FORM_FIELDS:
        if payload.get(key) is not None:
            fields[key] = str(payload[key])
    for key in JSON_FIELDS:
        value = payload.get(key)
        if value is None:
            continue
        fields[key] = value if isinstance(value, str) else json.dumps(value)
    return fields


class RecordStoreClient:
    """Client for the shipped-orders REST collaborator.

    Every record handed back has its JSON columns normalized.
    """

    def __init__(self, base_url: str, timeout: float = 15,
                 session: Optional[requests.Session] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls) -> "RecordStoreClient":
        settings = get_settings()
        if not settings.records_api_base_url:
            raise RecordStoreError("RECORDS_API_BASE_URL not configured", status=503)
        return cls(settings.records_api_base_url, settings.records_api_timeout_seconds)

    def _request(self, method: str, path: str = "", **kwargs) -> Any:
        url = f"{self.base_url}{RECORDS_PATH}{path}"
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.warning("Record store %s %s failed: %s", method, url, e)
            raise RecordStoreError(f"Record store unreachable: {e}") from e

        if not resp.ok:
            message = _error_message(resp)
            logger.warning("Record store %s %s returned %s", method, url, resp.status_code)
            raise RecordStoreError(
                message,
                status=resp.status_code,
                retry_after=_retry_after(resp.headers.get("Retry-After")),
            )
        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise RecordStoreError("Record store returned invalid JSON",
                                   status=resp.status_code) from e

    # -------------------------------
    # Reads
    # -------------------------------
    def list_records(self, page: int = 1, limit: int = 50,
                     search: Optional[str] = None) -> Tuple[List[OrderRecord], Pagination]:
        limit = min(max(limit, 1), RECORDS_MAX_PAGE_SIZE)
        params: Dict[str, Any] = {"page": page, "limit": limit}
        if search and search.strip():
            params["search"] = search.strip()
        body = self._request("GET", params=params)

        raw: List[Any] = []
        pagination = None
        if isinstance(body, list):
            raw = body
        elif isinstance(body, dict):
            pagination = body.get("pagination")
            if body.get("orders") is not None:
                orders = body["orders"]
                raw = orders if isinstance(orders, list) else [orders]
            elif isinstance(body.get("data"), list):
                raw = body["data"]
            elif body.get("id") is not None:
                raw = [body]

        records = [normalize_record(r) for r in raw if isinstance(r, dict)]
        if isinstance(pagination, dict):
            return records, Pagination.model_validate(pagination)
        return records, Pagination(
            page=1,
            limit=len(records),
            totalCount=len(records),
        )

    def iter_records(self, limit: int = RECORDS_MAX_PAGE_SIZE,
                     max_pages: int = RECORDS_MAX_PAGES,
                     search: Optional[str] = None) -> Iterator[OrderRecord]:
        page = 1
        while page <= max_pages:
            records, pagination = self.list_records(page=page, limit=limit, search=search)
            yield from records
            if not pagination.hasNextPage or not records:
                return
            page += 1

    def get_record(self, record_id: int) -> OrderRecord:
        body = _unwrap(self._request("GET", f"/{record_id}"))
        if not isinstance(body, dict):
            raise RecordStoreError(f"Record {record_id} not found", status=404)
        return normalize_record(body)

    # -------------------------------
    # Writes
    # -------------------------------
    def create_record(self, payload: Union[OrderRecord, Dict[str, Any]]) -> OrderRecord:
        body = _unwrap(self._request("POST", data=_form_fields(payload)))
        return normalize_record(body if isinstance(body, dict) else {})

    def update_record(self, record_id: int,
                      payload: Union[OrderRecord, Dict[str, Any]]) -> OrderRecord:
        body = _unwrap(self._request("PUT", f"/{record_id}", data=_form_fields(payload)))
        return normalize_record(body if isinstance(body, dict) else {"id": record_id})

    def delete_record(self, record_id: int) -> None:
        self._request("DELETE", f"/{record_id}")

    def delete_records_between(self, start: str, end: str) -> int:
        body = self._request("DELETE", params={"startDate": start, "endDate": end})
        if isinstance(body, dict):
            return int(body.get("count") or 0)
        return 0
