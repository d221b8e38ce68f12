from __future__ import annotations

from freightdesk.models import TrackingNumber
from freightdesk.tracking import infer_tracking_number, to_lookup_params


class TestInferTrackingNumber:
    def test_ten_digit_pro_from_order(self):
        record = {"ordersJsonb": {"proNumber": " 1234567890 "}, "bolResponseJsonb": {"bol": "B-1"}}
        assert infer_tracking_number(record) == TrackingNumber(kind="pro", value="1234567890")

    def test_pro_from_pickup_response(self):
        record = {"pickupResponseJsonb": {"pro": "0987654321"}}
        assert infer_tracking_number(record) == TrackingNumber(kind="pro", value="0987654321")

    def test_short_pro_falls_through(self):
        record = {"ordersJsonb": {"pro": "12345", "PO#": "PO-77"}}
        assert infer_tracking_number(record) == TrackingNumber(kind="po", value="PO-77")

    def test_short_pro_alone_is_absent(self):
        assert infer_tracking_number({"ordersJsonb": {"pro": "12345"}}) is None

    def test_short_pro_does_not_hide_valid_pro_number(self):
        record = {"ordersJsonb": {"pro": "12345", "proNumber": "1234567890"}}
        assert infer_tracking_number(record) == TrackingNumber(kind="pro", value="1234567890")

    def test_non_numeric_pro_rejected(self):
        record = {"ordersJsonb": {"pro": "12345ABCDE"}, "bolResponseJsonb": {"bolNumber": "778"}}
        assert infer_tracking_number(record) == TrackingNumber(kind="bol", value="778")

    def test_pur_before_po(self):
        record = {
            "rateQuotesResponseJsonb": {"pickupRequestNumber": "PUR-1"},
            "ordersJsonb": {"po": "PO-1"},
        }
        assert infer_tracking_number(record).kind == "pur"

    def test_remaining_kinds_in_order(self):
        assert infer_tracking_number({"ordersJsonb": {"loadNumber": "L1", "exl": "E1"}}).kind == "ldn"
        assert infer_tracking_number({"ordersJsonb": {"exl": "E1"}}).kind == "exl"
        record = {"ordersJsonb": {"interline_pro": "IP-9"}}
        assert infer_tracking_number(record) == TrackingNumber(kind="interlinePro", value="IP-9")

    def test_bol_only_probed_in_bol_response(self):
        assert infer_tracking_number({"ordersJsonb": {"bol": "B-1"}}) is None

    def test_nothing_found(self):
        assert infer_tracking_number({}) is None


class TestLookupParams:
    def test_exactly_one_field_set(self):
        params = to_lookup_params(TrackingNumber(kind="bol", value="B-2"))
        assert params.model_dump(exclude_none=True) == {"bol": "B-2"}

    def test_absent(self):
        assert to_lookup_params(None).model_dump(exclude_none=True) == {}
