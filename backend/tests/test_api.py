from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from freightdesk import main
from freightdesk.errors import RecordStoreError
from freightdesk.models import OrderRecord


@pytest.fixture
def client() -> TestClient:
    return TestClient(main.app)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


class TestRecordEndpoints:
    def test_normalize(self, client):
        resp = client.post("/records/normalize", json={"id": 1, "ordersJsonb": '{"a": 1}',
                                                        "bolResponseJsonb": "oops"})
        body = resp.json()
        assert body["ordersJsonb"] == {"a": 1}
        assert body["bolResponseJsonb"] is None

    def test_carrier(self, client):
        resp = client.post("/records/carrier",
                           json={"pickupResponseJsonb": {"data": {"carrier": "Estes"}}})
        assert resp.json() == {"carrier": "estes"}

    def test_consignee(self, client):
        resp = client.post("/records/consignee",
                           json={"ordersJsonb": {"Ship to City": "Austin", "Ship to Country": "Canada"}})
        assert resp.json()["city"] == "Austin"
        assert resp.json()["country"] == "CA"

    def test_tracking(self, client):
        resp = client.post("/tracking/infer", json={"ordersJsonb": {"pro": "12345", "po": "P-1"}})
        body = resp.json()
        assert body["tracking"] == {"kind": "po", "value": "P-1"}
        assert body["params"]["po"] == "P-1"
        assert body["params"]["pro"] is None


class TestShipmentEndpoints:
    RECORDS = [
        {"id": 1, "rateQuotesRequestJsonb": {
            "commodity": {"handlingUnits": [{"type": "PL", "count": 2, "weight": 500}]},
            "destination": {"address": {"postalCode": "90210"}}}},
        {"id": 2},
    ]

    def test_extract(self, client):
        resp = client.post("/shipments/extract", json=self.RECORDS)
        assert resp.json() == {"shipments": [
            {"type": "PALLET", "handlingUnits": "2", "weight": "500", "destinationZip": "90210"}]}

    def test_export(self, client):
        resp = client.post("/shipments/export", json=self.RECORDS)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet")
        assert resp.content[:2] == b"PK"


class TestBolEndpoints:
    def test_estes_validation_errors_are_422(self, client):
        resp = client.post("/bol/estes", json={})
        assert resp.status_code == 422
        assert "Ship Date is required" in resp.json()["detail"]["errors"]

    def test_estes_without_validation(self, client):
        form = {"handlingUnits": [{"quantity": 3, "class": "70", "items": []}]}
        resp = client.post("/bol/estes?validate=false", json=form)
        assert resp.status_code == 200
        unit = resp.json()["commodities"]["handlingUnits"][0]
        assert unit["lineItems"][0]["pieces"] == 3
        assert unit["lineItems"][0]["classification"] == "70"

    def test_xpo(self, client):
        resp = client.post("/bol/xpo?validate=false", json={"proNumberOption": "none"})
        assert resp.status_code == 200
        assert resp.json()["autoAssignPro"] is False
        assert resp.json()["bol"]["additionalService"] == []

    def test_xpo_malformed_pickup_time_is_422(self, client):
        location = {"company": "A", "streetAddress": "1 Main", "city": "Reno",
                    "state": "NV", "postalCode": "89501"}
        form = {
            "pickupLocation": location, "deliveryLocation": location,
            "commodities": [{"pieceCnt": 1}],
            "schedulePickup": True, "pickupDate": "2099-01-05",
            "pickupReadyTime": "09:00 AM", "dockCloseTime": "10:00 AM",
            "contactCompanyName": "A", "contactName": "Dana", "contactPhone": "7755550100",
        }
        resp = client.post("/bol/xpo", json=form)
        assert resp.status_code == 422
        assert "Pickup Ready Time must be a valid time (HH:MM)" in resp.json()["detail"]["errors"]

    def test_xpo_commodity_update(self, client):
        form = {"commodities": [{"packaging": {"packageCd": "BOX"}, "grossWeight": {"weight": 5}}]}
        resp = client.post("/bol/xpo/commodity", json={
            "form": form, "index": 0, "path": ["grossWeight", "weight"], "value": 90})
        assert resp.status_code == 200
        commodity = resp.json()[0]
        assert commodity["grossWeight"]["weight"] == 90
        assert commodity["packaging"]["packageCd"] == "BOX"

    def test_xpo_commodity_bad_index(self, client):
        resp = client.post("/bol/xpo/commodity", json={
            "form": {}, "index": 2, "path": ["desc"], "value": "x"})
        assert resp.status_code == 404

    def test_pickup_validation(self, client):
        resp = client.post("/pickup/xpo", json={})
        assert resp.status_code == 422
        assert "Please fill in pickup date and times" in resp.json()["detail"]["errors"]


class TestRecordSummary:
    def test_summary_from_store(self, client, monkeypatch):
        record = OrderRecord(id=5, bolResponseJsonb={"carrier": "xpo", "bol": "B-5", "weight": 40})

        class FakeStore:
            def get_record(self, record_id):
                assert record_id == 5
                return record

        monkeypatch.setattr(main.RecordStoreClient, "from_settings", classmethod(lambda cls: FakeStore()))
        body = client.get("/records/5/summary").json()
        assert body["carrier"] == "xpo"
        assert body["shipment"]["weight"] == "40"
        assert body["tracking"] == {"kind": "bol", "value": "B-5"}

    @pytest.mark.parametrize("status, expected", [(None, 502), (500, 502), (404, 404), (503, 503)])
    def test_store_errors(self, client, monkeypatch, status, expected):
        def boom(cls):
            raise RecordStoreError("nope", status=status)

        monkeypatch.setattr(main.RecordStoreClient, "from_settings", classmethod(boom))
        resp = client.get("/records/5/summary")
        assert resp.status_code == expected
        assert resp.json()["detail"] == "nope"
