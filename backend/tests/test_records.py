from __future__ import annotations

import pytest

from freightdesk.models import OrderRecord
from freightdesk.records import normalize_json_field, normalize_record


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"a": 1},
        '{"a": 1}',
        "  {\"carrier\": \"xpo\"}  ",
        "[1, 2]",
        "42",
        '"text"',
        "{not json",
        "",
        [1, 2],
        7,
        True,
    ],
)
def test_normalization_is_idempotent(raw):
    once = normalize_json_field(raw)
    assert normalize_json_field(once) == once


class TestNormalizeJsonField:
    def test_dict_returned_unchanged(self):
        blob = {"carrier": "estes"}
        assert normalize_json_field(blob) is blob

    def test_json_string_parsed(self):
        assert normalize_json_field('{"carrier": "estes"}') == {"carrier": "estes"}

    def test_malformed_json_is_absent(self):
        assert normalize_json_field("{carrier: estes") is None

    def test_non_object_json_is_absent(self):
        assert normalize_json_field("[1, 2]") is None
        assert normalize_json_field("12") is None

    def test_other_types_are_absent(self):
        assert normalize_json_field([{"a": 1}]) is None
        assert normalize_json_field(3.5) is None
        assert normalize_json_field(None) is None


class TestNormalizeRecord:
    def test_each_blob_normalized_independently(self):
        raw = {
            "id": 9,
            "sku": "SKU-1",
            "orderOnMarketPlace": "Amazon",
            "ordersJsonb": '{"PO#": "123"}',
            "rateQuotesRequestJsonb": None,
            "rateQuotesResponseJsonb": "not json",
            "bolResponseJsonb": {"pro": "1234567890"},
            "pickupResponseJsonb": "[]",
            "uploads": [{"path": "/a.pdf"}, "/b.pdf"],
        }
        record = normalize_record(raw)

        assert record.ordersJsonb == {"PO#": "123"}
        assert record.rateQuotesRequestJsonb is None
        assert record.rateQuotesResponseJsonb is None
        assert record.bolResponseJsonb == {"pro": "1234567890"}
        assert record.pickupResponseJsonb is None
        assert record.marketplace == "Amazon"
        assert record.sku == "SKU-1"
        assert len(record.uploads) == 2

    def test_input_is_not_mutated(self):
        raw = {"id": 1, "ordersJsonb": '{"a": 1}'}
        normalize_record(raw)
        assert raw["ordersJsonb"] == '{"a": 1}'

    def test_accepts_model_and_keeps_extra_fields(self):
        record = OrderRecord.model_validate({"id": 3, "ordersJsonb": '{"a": 1}', "warehouse": "LA"})
        out = normalize_record(record)
        assert out is not record
        assert out.ordersJsonb == {"a": 1}
        assert out.model_dump()["warehouse"] == "LA"

    def test_renormalizing_is_stable(self):
        once = normalize_record({"id": 1, "bolResponseJsonb": '{"bol": "B1"}'})
        assert normalize_record(once).model_dump() == once.model_dump()

    def test_store_nulls_and_numbers_are_coerced(self):
        out = normalize_record({"id": "7", "uploads": None, "sku": 12345,
                                "orderOnMarketPlace": None, "status": 3})
        assert out.id == 7
        assert out.uploads == []
        assert out.sku == "12345"
        assert out.status == "3"
