from __future__ import annotations

import pytest

from freightdesk.models import ShipmentSummary
from freightdesk.shipments import (
    extract_shipment_summaries,
    extract_shipment_summary,
    has_evidence,
    map_handling_unit_type,
    to_pickup_shipments,
)


@pytest.mark.parametrize(
    "code, expected",
    [
        ("PL", "PALLET"),
        ("pl", "PALLET"),
        ("SKID", "SKID"),
        ("WOOD_SKID", "SKID"),
        ("PIECES", "PIECE"),
        ("BX", "PALLET"),
        (None, "PALLET"),
    ],
)
def test_map_handling_unit_type(code, expected):
    assert map_handling_unit_type(code) == expected


class TestExtractShipmentSummary:
    def test_rate_quote_request_end_to_end(self):
        record = {
            "rateQuotesRequestJsonb": {
                "commodity": {"handlingUnits": [{"type": "PL", "count": 2, "weight": 500}]},
                "destination": {"address": {"postalCode": "90210"}},
            }
        }
        summary = extract_shipment_summary(record)
        assert summary == ShipmentSummary(
            type="PALLET", handlingUnits="2", weight="500", destinationZip="90210")

    def test_later_sources_only_fill_gaps(self):
        record = {
            "rateQuotesRequestJsonb": {"commodity": {"handlingUnits": [{"type": "SKID", "count": 3}]}},
            "rateQuotesResponseJsonb": {
                "commodity": {"handlingUnits": [{"type": "PL", "count": 9, "weight": 710.0}]},
            },
            "ordersJsonb": {"weight": "999", "postal_code": "10001"},
            "bolResponseJsonb": {"consignee": {"zipCode": "30301"}},
        }
        summary = extract_shipment_summary(record)
        assert summary.type == "SKID"
        assert summary.handlingUnits == "3"
        assert summary.weight == "710"
        assert summary.destinationZip == "10001"

    def test_data_envelope_on_quote_blob(self):
        record = {
            "rateQuotesResponseJsonb": {
                "data": {
                    "commodity": {"handlingUnits": [{"count": 1, "weight": 40}]},
                    "destination": {"address": {"postalCode": "60601"}},
                }
            }
        }
        summary = extract_shipment_summary(record)
        assert summary.handlingUnits == "1"
        assert summary.weight == "40"
        assert summary.destinationZip == "60601"

    def test_order_nested_destination(self):
        record = {"ordersJsonb": {"units": 4, "destination": {"address": {"postalCode": "73301"}}}}
        summary = extract_shipment_summary(record)
        assert summary.handlingUnits == "4"
        assert summary.destinationZip == "73301"

    def test_bol_response_fallbacks(self):
        record = {
            "bolResponseJsonb": {
                "destination": {"address": {"postalCode": "98101"}},
                "weightLbs": 120,
                "handling_units": 2,
            }
        }
        summary = extract_shipment_summary(record)
        assert summary.destinationZip == "98101"
        assert summary.weight == "120"
        assert summary.handlingUnits == "2"

    def test_bol_consignee_zip(self):
        record = {"bolResponseJsonb": {"consignee": {"postal_code": "02108"}}}
        assert extract_shipment_summary(record).destinationZip == "02108"

    def test_no_evidence(self):
        summary = extract_shipment_summary({"ordersJsonb": {"note": "hello"}})
        assert summary == ShipmentSummary()
        assert summary.type == "PALLET"
        assert not has_evidence(summary)


class TestBatchExtraction:
    def test_records_without_evidence_are_dropped(self):
        records = [
            {"id": 1, "ordersJsonb": '{"weight": 10}'},
            {"id": 2},
            {"id": 3, "ordersJsonb": "not json", "bolResponseJsonb": None},
            {"id": 4, "bolResponseJsonb": {"consignee": {"postalCode": "11111"}}},
        ]
        summaries = extract_shipment_summaries(records)
        assert [s.weight for s in summaries] == ["10", ""]
        assert summaries[1].destinationZip == "11111"

    def test_null_uploads_and_numeric_sku_do_not_abort_batch(self):
        records = [
            {"id": 1, "uploads": None,
             "rateQuotesRequestJsonb": {"destination": {"address": {"postalCode": "90210"}}}},
            {"id": 2, "sku": 12345, "status": 1, "ordersJsonb": {"weight": 15}},
        ]
        summaries = extract_shipment_summaries(records)
        assert [s.destinationZip for s in summaries] == ["90210", ""]
        assert summaries[1].weight == "15"

    def test_pickup_shape(self):
        rows = to_pickup_shipments([ShipmentSummary(weight="10")])
        assert rows == [
            {"type": "PALLET", "handlingUnits": None, "weight": "10", "destinationZip": None}
        ]
