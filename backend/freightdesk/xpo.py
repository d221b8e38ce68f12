from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Sequence, Union
from zoneinfo import ZoneInfo

from .config import get_settings
from .constants import (
    XPO_COUNTRY_CODES,
    XPO_DEFAULT_CHARGE_TO,
    XPO_DEFAULT_COUNTRY,
    XPO_DEFAULT_PACKAGE_CODE,
    XPO_DEFAULT_ROLE,
    XPO_PRO_AUTO,
    XPO_PRO_PREASSIGNED,
)
from .errors import ValidationFailure
from .models import (
    XpoCommodity,
    XpoFormState,
    XpoLocation,
    XpoPickupContact,
    XpoPickupFormState,
    XpoPickupItem,
)
from .utils import clean, dedupe, digits_only

logger = logging.getLogger(__name__)

PathStep = Union[str, int]


# -------------------------------
# Small formatters
# -------------------------------
def normalize_country(value: Optional[str]) -> str:
    country = clean(value)
    if not country:
        return XPO_DEFAULT_COUNTRY
    return XPO_COUNTRY_CODES.get(country.upper(), country)


def normalize_xpo_phone(value: Optional[str]) -> str:
    """Phone in the carrier's NNN-NNNNNNN form; short numbers pass as digits."""
    phone = re.sub(r"[\s()]", "", clean(value))
    if phone.startswith("+1"):
        phone = re.sub(r"^\+1[\s-]*", "", phone)
    elif phone.startswith("1-") and len(digits_only(phone)) >= 11:
        phone = phone[2:]
    elif re.fullmatch(r"1\d{10}", phone):
        phone = phone[1:]
    digits = digits_only(phone)
    if len(digits) >= 10:
        return f"{digits[:3]}-{digits[3:10]}"
    return digits


def _parse_time(value: str) -> str:
    parts = value.split(":")
    while len(parts) < 3:
        parts.append("00")
    return ":".join(p.zfill(2) for p in parts[:3])


def _clock(value: str) -> Optional[str]:
    """`HH:MM[:SS]` as `HH:MM:SS`, or None when it is not a wall-clock time."""
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(value.strip(), fmt).strftime("%H:%M:%S")
        except ValueError:
            continue
    return None


def _calendar_day(value: str) -> Optional[date]:
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None


def format_local_datetime(day: str, time: str, tz: Optional[str] = None) -> str:
    """`2024-05-01` + `08:30` -> `2024-05-01T08:30:00-07:00` in the operator's zone.

    Zones behind UTC carry a '-' offset. `tz` falls back to the configured
    LOCAL_TIMEZONE and then to the host's local zone. Raises ValueError for a
    day or time that does not parse.
    """
    if not day or not time:
        return ""
    clock = _clock(time)
    if clock is None:
        raise ValueError(f"Invalid time: {time!r}")
    naive = datetime.strptime(f"{day.strip()}T{clock}", "%Y-%m-%dT%H:%M:%S")
    zone = tz or get_settings().local_timezone
    if zone:
        local = naive.replace(tzinfo=ZoneInfo(zone))
    else:
        local = naive.astimezone()
    return local.isoformat(timespec="seconds")


# -------------------------------
# Lens updates
# -------------------------------
def set_in(obj: Any, path: Sequence[PathStep], value: Any) -> Any:
    """Copy of `obj` with `value` stored at `path`; siblings along the path
    are kept and `obj` itself is left untouched."""
    if not path:
        return value
    head, rest = path[0], path[1:]
    if isinstance(head, int):
        items = list(obj) if isinstance(obj, list) else []
        while len(items) <= head:
            items.append({})
        items[head] = set_in(items[head], rest, value)
        return items
    node = dict(obj) if isinstance(obj, dict) else {}
    node[head] = set_in(node.get(head), rest, value)
    return node


def update_commodity(commodities: Sequence[XpoCommodity], index: int,
                     path: Sequence[PathStep], value: Any) -> List[XpoCommodity]:
    """Edit one field of one commodity, e.g. path ("grossWeight", "weight")."""
    if not 0 <= index < len(commodities):
        raise IndexError(f"No commodity at index {index}")
    out = list(commodities)
    updated = set_in(out[index].model_dump(), path, value)
    out[index] = XpoCommodity.model_validate(updated)
    return out


# -------------------------------
# BOL
# -------------------------------
def validate_xpo_form(form: XpoFormState, today: Optional[date] = None) -> List[str]:
    errors: List[str] = []
    for label, location in (("Pickup", form.pickupLocation), ("Delivery", form.deliveryLocation)):
        for attr, name in (
            ("company", "Company Name"),
            ("streetAddress", "Street Address"),
            ("city", "City"),
            ("state", "State"),
            ("postalCode", "Postal Code"),
        ):
            if not clean(getattr(location, attr)):
                errors.append(f"{label} {name} is required")
    if not form.commodities:
        errors.append("At least one commodity is required")

    if form.schedulePickup:
        if not (form.pickupDate and form.pickupReadyTime and form.dockCloseTime):
            errors.append("Please fill in all required Pickup Request fields "
                          "(Date, Ready Time, Dock Close Time)")
        else:
            today = today or date.today()
            day = _calendar_day(form.pickupDate)
            ready = _clock(form.pickupReadyTime)
            close = _clock(form.dockCloseTime)
            if day is None:
                errors.append("Pickup Date must be a valid date (YYYY-MM-DD)")
            elif day < today:
                errors.append("Pickup date cannot be in the past. "
                              "Please select today or a future date.")
            if ready is None:
                errors.append("Pickup Ready Time must be a valid time (HH:MM)")
            if close is None:
                errors.append("Dock Close Time must be a valid time (HH:MM)")
            if ready and close and ready >= close:
                errors.append("Pickup Ready Time must be before Dock Close Time")
        if not (clean(form.contactCompanyName) and clean(form.contactName)
                and clean(form.contactPhone)):
            errors.append("Please fill in all required Pickup Contact fields "
                          "(Company Name, Contact Name, Phone Number)")

    if form.proNumberOption == XPO_PRO_PREASSIGNED and not clean(form.preAssignedProNumber):
        errors.append("Pre-assigned PRO number is required")
    return errors


def _party(location: XpoLocation) -> Dict[str, Any]:
    address: Dict[str, Any] = {"addressLine1": clean(location.streetAddress)}
    if clean(location.addressLine2):
        address["addressLine2"] = clean(location.addressLine2)
    address.update({
        "cityName": clean(location.city),
        "stateCd": clean(location.state),
        "countryCd": normalize_country(location.country),
        "postalCd": clean(location.postalCode),
    })

    contact: Dict[str, Any] = {"companyName": clean(location.company)}
    if clean(location.email):
        contact["email"] = {"emailAddr": clean(location.email)}
    phone = normalize_xpo_phone(location.phone)
    if phone:
        contact["phone"] = {"phoneNbr": phone}
    return {"address": address, "contactInfo": contact}


def _commodity_line(commodity: XpoCommodity) -> Dict[str, Any]:
    packaging = commodity.packaging.model_dump()
    packaging["packageCd"] = clean(packaging.get("packageCd")) or XPO_DEFAULT_PACKAGE_CODE
    line: Dict[str, Any] = {
        "pieceCnt": commodity.pieceCnt,
        "packaging": packaging,
        "grossWeight": commodity.grossWeight.model_dump(),
        "desc": clean(commodity.desc),
        "hazmatInd": commodity.hazmatInd,
    }
    for attr in ("nmfcClass", "nmfcItemCd", "sub"):
        if clean(getattr(commodity, attr)):
            line[attr] = clean(getattr(commodity, attr))
    return line


def _pickup_info(form: XpoFormState) -> Optional[Dict[str, Any]]:
    required = (
        form.pickupDate, form.pickupReadyTime, form.dockCloseTime,
        form.contactCompanyName, form.contactName, form.contactPhone,
    )
    if not form.schedulePickup or not all(clean(v) for v in required):
        return None
    try:
        ready = format_local_datetime(form.pickupDate, form.pickupReadyTime)
        close = format_local_datetime(form.pickupDate, form.dockCloseTime)
    except ValueError:
        logger.debug("Unparseable pickup date or time, leaving pickupInfo out")
        return None
    return {
        "pkupDate": ready,
        "pkupTime": ready,
        "dockCloseTime": close,
        "contact": {
            "companyName": clean(form.contactCompanyName),
            "fullName": clean(form.contactName),
            "phone": {"phoneNbr": normalize_xpo_phone(form.contactPhone)},
        },
    }


def _declared_value(raw: str) -> Optional[float]:
    try:
        amount = float(clean(raw))
    except ValueError:
        return None
    return amount if amount > 0 else None


def build_xpo_bol_request(form: XpoFormState, validate: bool = False) -> Dict[str, Any]:
    """XPO BOL wire payload for a filled-in form.

    `additionalService` and the emergency contact fields are always sent;
    the carrier rejects the request when they are missing.
    """
    if validate:
        errors = validate_xpo_form(form)
        if errors:
            raise ValidationFailure(errors)

    bol: Dict[str, Any] = {
        "requester": {"role": clean(form.requesterRole) or XPO_DEFAULT_ROLE},
        "consignee": _party(form.deliveryLocation),
        "shipper": _party(form.pickupLocation),
        "billToCust": _party(form.billTo or form.pickupLocation),
        "commodityLine": [_commodity_line(c) for c in form.commodities],
        "chargeToCd": clean(form.paymentTerms) or XPO_DEFAULT_CHARGE_TO,
    }
    if clean(form.additionalComments):
        bol["remarks"] = clean(form.additionalComments)
    bol["emergencyContactName"] = clean(form.emergencyContactName)
    bol["emergencyContactPhone"] = {"phoneNbr": clean(form.emergencyContactPhone)}
    bol["additionalService"] = dedupe(
        form.selectedPickupServices
        + form.selectedDeliveryServices
        + form.selectedPremiumServices
    )

    refs = [r.model_dump(exclude_none=True) for r in form.references if clean(r.reference)]
    if refs:
        bol["suppRef"] = {"otherRefs": refs}
    amount = _declared_value(form.totalDeclaredValue)
    if amount is not None:
        bol["declaredValueAmt"] = {"amt": amount}
    if clean(form.excessiveLiabilityAuth):
        bol["excessLiabilityChargeInit"] = clean(form.excessiveLiabilityAuth)
    pickup = _pickup_info(form)
    if pickup is not None:
        bol["pickupInfo"] = pickup
    if form.proNumberOption == XPO_PRO_PREASSIGNED and clean(form.preAssignedProNumber):
        bol["proNbr"] = clean(form.preAssignedProNumber)

    return {"bol": bol, "autoAssignPro": form.proNumberOption == XPO_PRO_AUTO}


# -------------------------------
# Standalone pickup request
# -------------------------------
def _pickup_timestamp(day: str, time: str) -> str:
    if not day:
        return ""
    if "T" in time:
        time = time.split("T", 1)[1]
    elif " " in time:
        time = time.split(" ", 1)[1]
    elif not re.fullmatch(r"\d{1,2}:\d{2}(:\d{2})?", time):
        time = ""
    return f"{day}T{_parse_time(time) if time else '00:00:00'}"


def _pickup_contact(contact: XpoPickupContact) -> Dict[str, Any]:
    return {
        "companyName": clean(contact.companyName),
        "email": {"emailAddr": clean(contact.email)},
        "fullName": clean(contact.fullName),
        "phone": {"phoneNbr": normalize_xpo_phone(contact.phone)},
    }


def _pickup_item(item: XpoPickupItem) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "destZip6": clean(item.destZip),
        "totWeight": {"weight": item.weight},
        "loosePiecesCnt": item.loosePiecesCnt,
        "palletCnt": item.palletCnt,
        "garntInd": item.garntInd,
        "hazmatInd": item.hazmatInd,
        "frzbleInd": item.frzbleInd,
        "holDlvrInd": item.holDlvrInd,
        "foodInd": item.foodInd,
    }
    if clean(item.remarks):
        out["remarks"] = clean(item.remarks)
    return out


def validate_xpo_pickup_form(form: XpoPickupFormState) -> List[str]:
    errors: List[str] = []
    if not (form.pickupDate and form.readyTime and form.closeTime):
        errors.append("Please fill in pickup date and times")
    shipper = form.shipper
    if not all(clean(v) for v in (shipper.company, shipper.streetAddress, shipper.city,
                                  shipper.state, shipper.postalCode)):
        errors.append("Please fill in all required Shipper fields")
    for label, contact in (("Requestor", form.requestor), ("Contact", form.contact)):
        if not all(clean(v) for v in (contact.companyName, contact.fullName, contact.phone)):
            errors.append(f"Please fill in all required {label} fields")
    if not form.items or any(item.weight <= 0 for item in form.items):
        errors.append("Please add at least one pickup item with weight")
    return errors


def build_xpo_pickup_request(form: XpoPickupFormState, validate: bool = False) -> Dict[str, Any]:
    if validate:
        errors = validate_xpo_pickup_form(form)
        if errors:
            raise ValidationFailure(errors)

    shipper: Dict[str, Any] = {
        "name": clean(form.shipper.company),
        "addressLine1": clean(form.shipper.streetAddress),
    }
    if clean(form.shipper.addressLine2):
        shipper["addressLine2"] = clean(form.shipper.addressLine2)
    shipper.update({
        "cityName": clean(form.shipper.city),
        "stateCd": clean(form.shipper.state),
        "countryCd": normalize_country(form.shipper.country),
        "postalCd": clean(form.shipper.postalCode),
    })

    info: Dict[str, Any] = {
        "pkupDate": _pickup_timestamp(form.pickupDate, ""),
        "readyTime": _pickup_timestamp(form.pickupDate, form.readyTime),
        "closeTime": _pickup_timestamp(form.pickupDate, form.closeTime),
    }
    if clean(form.specialEquipmentCd):
        info["specialEquipmentCd"] = clean(form.specialEquipmentCd)
    if form.insidePkupInd is not None:
        info["insidePkupInd"] = form.insidePkupInd
    info.update({
        "shipper": shipper,
        "requestor": {
            "contact": _pickup_contact(form.requestor),
            "roleCd": clean(form.requestorRoleCd) or XPO_DEFAULT_ROLE,
        },
        "contact": _pickup_contact(form.contact),
    })
    if clean(form.remarks):
        info["remarks"] = clean(form.remarks)
    info["pkupItem"] = [_pickup_item(i) for i in form.items]
    return {"pickupRqstInfo": info}
