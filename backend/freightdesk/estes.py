from __future__ import annotations

from typing import Any, Dict, List, Union

from .constants import (
    ESTES_ACCESSORIAL_CODES,
    ESTES_BOL_VERSION,
    ESTES_DEFAULT_COUNTRY,
    ESTES_DEFAULT_HANDLING_UNIT_TYPE,
    ESTES_DEFAULT_PIECE_TYPE,
    ESTES_DIMENSIONS_UNIT,
    ESTES_HANDLING_UNIT_TYPES,
    ESTES_PICKUP_TIME_SUFFIX,
    ESTES_PIECE_TYPES,
    ESTES_ROLES,
    ESTES_SPECIAL_HANDLING_CODES,
    ESTES_WEIGHT_UNIT,
)
from .errors import ValidationFailure
from .models import EstesFormState, EstesHandlingUnit
from .utils import clean, dedupe, digits_only

# (form field prefix, label used in messages)
_PARTIES = (
    ("origin", "Origin"),
    ("destination", "Destination"),
    ("billTo", "Bill To"),
)

_REQUIRED_PARTY_FIELDS = (
    ("Name", "Company Name"),
    ("Address1", "Address Line 1"),
    ("City", "City"),
    ("State", "State"),
    ("ZipCode", "ZIP Code"),
    ("Phone", "Phone Number"),
)


def _number(value: float) -> Union[int, float]:
    return int(value) if float(value).is_integer() else value


def validate_estes_form(form: EstesFormState) -> List[str]:
    """Human-readable messages for every missing required field."""
    errors: List[str] = []
    if not clean(form.shipDate):
        errors.append("Ship Date is required")
    for prefix, label in _PARTIES:
        for suffix, name in _REQUIRED_PARTY_FIELDS:
            if not clean(getattr(form, prefix + suffix)):
                errors.append(f"{label} {name} is required")
    if not form.handlingUnits:
        errors.append("At least one handling unit is required")
    for i, unit in enumerate(form.handlingUnits, start=1):
        if not unit.items:
            errors.append(f"Handling Unit {i}: At least one item is required")
        elif any(not clean(item.description) for item in unit.items):
            errors.append(f"Handling Unit {i}: Description is required for all items")
    return errors


def _party(form: EstesFormState, prefix: str, with_account: bool) -> Dict[str, Any]:
    def field(suffix: str) -> str:
        return clean(getattr(form, prefix + suffix))

    party: Dict[str, Any] = {}
    if with_account:
        party["account"] = field("Account")
    party.update({
        "name": field("Name"),
        "address1": field("Address1"),
        "city": field("City"),
        "stateProvince": field("State"),
        "postalCode": field("ZipCode"),
        "country": field("Country") or ESTES_DEFAULT_COUNTRY,
    })
    if field("Address2"):
        party["address2"] = field("Address2")

    contact: Dict[str, str] = {}
    if field("Phone"):
        contact["phone"] = digits_only(field("Phone"))
    if field("Email"):
        contact["email"] = field("Email")
    if field("ContactName"):
        contact["name"] = field("ContactName")
    # a contact name on its own is not sent
    if "phone" in contact or "email" in contact:
        party["contact"] = contact
    return party


def _line_item(unit: EstesHandlingUnit, description: str, pieces: int,
               piece_type: str) -> Dict[str, Any]:
    return {
        "description": description,
        "weight": _number(unit.weight or 0),
        "weightUnit": ESTES_WEIGHT_UNIT,
        "pieces": pieces,
        "packagingType": ESTES_PIECE_TYPES.get(piece_type, piece_type or ESTES_DEFAULT_PIECE_TYPE),
        "classification": clean(unit.freightClass),
        "nmfc": clean(unit.nmfc),
        "nmfcSub": clean(unit.sub),
        "hazardous": False,
    }


def _handling_unit(unit: EstesHandlingUnit) -> Dict[str, Any]:
    items = [
        _line_item(unit, item.description or "", item.pieces or 1, item.pieceType)
        for item in unit.items
    ]
    if not items:
        items = [_line_item(unit, "", unit.quantity or 1, ESTES_DEFAULT_PIECE_TYPE)]
    return {
        "count": unit.quantity or 1,
        "type": ESTES_HANDLING_UNIT_TYPES.get(unit.handlingUnitType, ESTES_DEFAULT_HANDLING_UNIT_TYPE),
        "weight": _number(unit.weight or 0),
        "weightUnit": ESTES_WEIGHT_UNIT,
        "length": _number(unit.length or 0),
        "width": _number(unit.width or 0),
        "height": _number(unit.height or 0),
        "dimensionsUnit": ESTES_DIMENSIONS_UNIT,
        "stackable": not unit.doNotStack,
        "lineItems": items,
    }


def _shipping_label_format(value: str) -> str:
    if "Zebra" in value:
        return "Zebra"
    return value.split(" ")[0]


def build_estes_bol_request(form: EstesFormState, validate: bool = False) -> Dict[str, Any]:
    """Estes BOL wire payload for a filled-in form.

    Optional blocks (address2, contact, referenceNumbers,
    specialInstructions, shippingLabels) are omitted rather than sent empty.
    """
    if validate:
        errors = validate_estes_form(form)
        if errors:
            raise ValidationFailure(errors)

    codes = [ESTES_ACCESSORIAL_CODES[a] for a in form.selectedAccessorials
             if a in ESTES_ACCESSORIAL_CODES]
    bol_emails = [e.strip() for e in form.billOfLadingEmails if e.strip()]
    tracking_emails: List[str] = []
    if form.trackingUpdatesNotification:
        tracking_emails = [e.strip() for e in form.trackingUpdatesEmails if e.strip()]

    bol: Dict[str, Any] = {
        "function": "Create",
        "isTest": False,
        "requestorRole": ESTES_ROLES.get(form.role, form.role),
    }
    ship_date = clean(form.shipDate)
    if ship_date:
        bol["requestedPickupDate"] = f"{ship_date}{ESTES_PICKUP_TIME_SUFFIX}"
    special = [s for s in form.specialHandlingRequests if s in ESTES_SPECIAL_HANDLING_CODES]
    if special:
        bol["specialInstructions"] = ",".join(special)

    images: Dict[str, Any] = {
        "includeBol": form.billOfLadingNotification,
        "includeShippingLabels": form.shippingLabelsNotification,
        "email": {
            "includeBol": form.billOfLadingNotification,
            "includeLabels": form.shippingLabelsNotification,
            "addresses": bol_emails,
        },
    }
    if form.shippingLabelsNotification:
        images["shippingLabels"] = {
            "format": _shipping_label_format(form.shippingLabelFormat),
            "quantity": form.shippingLabelQuantity,
            "position": form.shippingLabelPosition,
        }

    body: Dict[str, Any] = {
        "version": ESTES_BOL_VERSION,
        "bol": bol,
        "payment": {"terms": form.terms},
        "origin": _party(form, "origin", with_account=True),
        "destination": _party(form, "destination", with_account=False),
        "billTo": _party(form, "billTo", with_account=True),
        "commodities": {
            "lineItemLayout": "Nested",
            "handlingUnits": [_handling_unit(u) for u in form.handlingUnits],
        },
        "accessorials": {"codes": codes},
        "images": images,
        "notifications": [{"email": e} for e in dedupe(bol_emails + tracking_emails)],
    }

    references: Dict[str, str] = {}
    if clean(form.masterBol):
        references["masterBol"] = clean(form.masterBol)
    if clean(form.quoteId):
        references["quoteID"] = clean(form.quoteId)
    if references:
        body["referenceNumbers"] = references
    return body
