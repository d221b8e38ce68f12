from __future__ import annotations

# JSON blob columns on a stored order record (wire names)
JSON_FIELDS = (
    "ordersJsonb",
    "rateQuotesRequestJsonb",
    "rateQuotesResponseJsonb",
    "bolResponseJsonb",
    "pickupResponseJsonb",
)

# -------------------------------
# Carrier evidence
# -------------------------------
SHIPPING_COMPANY_KEYS = (
    "shippingCompany",
    "shipping_company",
    "shippingCompanyName",
    "company",
    "carrier",
)

# Blobs probed for shipping-company evidence, strongest first.
# The flag says whether a nested `data.*` envelope is also probed.
CARRIER_EVIDENCE = (
    ("rateQuotesRequestJsonb", False),
    ("rateQuotesResponseJsonb", True),
    ("bolResponseJsonb", True),
    ("pickupResponseJsonb", True),
)

ORDER_CARRIER_KEYS = ("carrier", "logisticsCompany")

CARRIER_ALIASES = {
    "estes": "estes",
    "xpo": "xpo",
    "expo": "xpo",
}

# -------------------------------
# Shipment summary evidence
# -------------------------------
DEFAULT_SHIPMENT_TYPE = "PALLET"

HANDLING_UNIT_KEYS = ("handlingUnits", "handling_units", "units", "count")
WEIGHT_KEYS = ("weight", "weightLbs", "weight_lbs")
DESTINATION_ZIP_KEYS = ("destinationZip", "destination_zip", "postalCode", "postal_code")
CONSIGNEE_ZIP_KEYS = ("postalCode", "postal_code", "zipCode")

# Rate quote blobs keep the first handling unit and the destination at fixed paths.
QUOTE_HANDLING_UNIT_PATH = ("commodity", "handlingUnits", 0)
QUOTE_DESTINATION_ZIP_PATH = ("destination", "address", "postalCode")

# -------------------------------
# Tracking numbers
# -------------------------------
PRO_KEYS = ("pro", "proNumber", "trackingNumber", "tracking_number")
BOL_KEYS = ("bol", "bolNumber", "billOfLading", "bill_of_lading")
PUR_KEYS = ("pur", "pickupRequest", "pickup_request", "pickupRequestNumber")
PO_KEYS = ("po", "PO#", "purchaseOrder", "purchase_order")
LDN_KEYS = ("ldn", "loadNumber")
EXL_KEYS = ("exl",)
INTERLINE_PRO_KEYS = ("interlinePro", "interline_pro")

# (kind, blobs in probe order, candidate keys), first match wins
TRACKING_PROBES = (
    ("pro", ("ordersJsonb", "pickupResponseJsonb"), PRO_KEYS),
    ("bol", ("bolResponseJsonb",), BOL_KEYS),
    ("pur", ("rateQuotesResponseJsonb", "pickupResponseJsonb"), PUR_KEYS),
    ("po", ("ordersJsonb",), PO_KEYS),
    ("ldn", ("ordersJsonb",), LDN_KEYS),
    ("exl", ("ordersJsonb",), EXL_KEYS),
    ("interlinePro", ("ordersJsonb",), INTERLINE_PRO_KEYS),
)

PRO_LENGTH = 10

# -------------------------------
# Estes BOL
# -------------------------------
ESTES_BOL_VERSION = "v2.0.1"

ESTES_ACCESSORIAL_CODES = {
    "Appointment Request": "APPT",
    "Lift-Gate Service (Delivery)": "LFTD",
    "Residential Delivery": "RES",
}

ESTES_SPECIAL_HANDLING_CODES = {
    "Added Accessorials Require Pre Approval": "PREACC",
    "Do Not Break Down the Pallet": "DBDP",
    "Do Not Remove Shrink Wrap from Skid": "SKSW",
    "Fragile-Handle with Care": "FRAG",
}

ESTES_HANDLING_UNIT_TYPES = {
    "PALLET": "PAT",
    "SKID": "SKD",
    "CRATE": "CRT",
    "BOX": "BOX",
}
ESTES_DEFAULT_HANDLING_UNIT_TYPE = "PAT"

ESTES_PIECE_TYPES = {"CARTON": "CTN"}
ESTES_DEFAULT_PIECE_TYPE = "CTN"

ESTES_ROLES = {"Third-Party": "Third Party"}

ESTES_WEIGHT_UNIT = "Pounds"
ESTES_DIMENSIONS_UNIT = "Inches"
ESTES_DEFAULT_COUNTRY = "USA"
ESTES_PICKUP_TIME_SUFFIX = "T00:00:00.000"

# -------------------------------
# XPO BOL
# -------------------------------
XPO_DEFAULT_ROLE = "S"
XPO_DEFAULT_CHARGE_TO = "P"
XPO_DEFAULT_PACKAGE_CODE = "PLT"
XPO_DEFAULT_COUNTRY = "US"

XPO_COUNTRY_CODES = {
    "UNITED STATES": "US",
    "UNITED STATES OF AMERICA": "US",
    "USA": "US",
    "US": "US",
    "CANADA": "CA",
    "CA": "CA",
    "MEXICO": "MX",
    "MX": "MX",
}

XPO_PRO_AUTO = "auto"
XPO_PRO_PREASSIGNED = "preassigned"

# -------------------------------
# Order auto-fill (marketplace export headers)
# -------------------------------
CONSIGNEE_SYNONYMS = {
    "company": ("Ship to Name", "Customer Name", "Company Name", "Shipping Name"),
    "streetAddress": (
        "Ship to Address 1",
        "Shipping Address",
        "Customer Address",
        "Customer Address 1",
        "Address",
        "Address 1",
        "Ship to Address",
    ),
    "addressLine2": ("Ship to Address 2", "Customer Address 2", "Address 2"),
    "city": ("Ship to City", "Shipping City", "Customer City", "City"),
    "state": (
        "Ship to State",
        "Shipping State",
        "Customer State",
        "Ship to State/Province",
        "State",
    ),
    "postalCode": (
        "Ship to Zip Code",
        "Shipping Zip Code",
        "Customer Zip Code",
        "Zip",
        "Postal Code",
        "Ship to Postal Code",
        "ZIP Code",
    ),
    "country": ("Ship to Country", "Shipping Country", "Customer Country", "Country"),
    "phone": (
        "Ship to Phone",
        "Customer Phone",
        "Customer Phone Number",
        "Phone",
        "Phone Number",
        "Shipping Phone",
    ),
    "email": (
        "Ship to Email",
        "Customer Email",
        "Customer Email Address",
        "Email",
        "Shipping Email",
    ),
}

ORDER_WEIGHT_SYNONYMS = ("Weight", "Total Weight")

# -------------------------------
# Record store
# -------------------------------
RECORDS_PATH = "/Logistics/shipped-orders"
RECORDS_MAX_PAGE_SIZE = 100
RECORDS_MAX_PAGES = 100
