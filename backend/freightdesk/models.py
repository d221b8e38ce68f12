from __future__ import annotations

from enum import Enum
from typing import Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Carrier(str, Enum):
    ESTES = "estes"
    XPO = "xpo"
    UNKNOWN = "unknown"


# -------------------------------
# Stored order records
# -------------------------------
class Upload(BaseModel):
    model_config = ConfigDict(extra="allow")

    path: str = ""
    filename: Optional[str] = None
    mimetype: Optional[str] = None
    size: Optional[int] = None


class OrderRecord(BaseModel):
    """One processed order as the record store hands it over.

    The *Jsonb columns are loosely typed on the way in (dict, JSON string,
    null); after `records.normalize_record` each is a dict or None.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True, coerce_numbers_to_str=True)

    id: Optional[int] = None
    sku: Optional[str] = None
    marketplace: Optional[str] = Field(None, alias="orderOnMarketPlace")
    status: Optional[str] = None
    ordersJsonb: Any = None
    rateQuotesRequestJsonb: Any = None
    rateQuotesResponseJsonb: Any = None
    bolResponseJsonb: Any = None
    pickupResponseJsonb: Any = None
    uploads: List[Union[Upload, str]] = Field(default_factory=list)
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None

    @field_validator("uploads", mode="before")
    @classmethod
    def _uploads_list(cls, v: Any) -> Any:
        return [] if v is None else v


class Pagination(BaseModel):
    page: int = 1
    limit: int = 0
    totalCount: int = 0
    totalPages: int = 1
    hasNextPage: bool = False
    hasPreviousPage: bool = False


class ShipmentSummary(BaseModel):
    type: str = "PALLET"
    handlingUnits: str = ""
    weight: str = ""
    destinationZip: str = ""


TrackingKind = Literal["pro", "bol", "pur", "po", "ldn", "exl", "interlinePro"]


class TrackingNumber(BaseModel):
    kind: TrackingKind
    value: str


class TrackingLookupParams(BaseModel):
    pro: Optional[str] = None
    po: Optional[str] = None
    bol: Optional[str] = None
    pur: Optional[str] = None
    ldn: Optional[str] = None
    exl: Optional[str] = None
    interlinePro: Optional[str] = None


# -------------------------------
# Estes BOL form state
# -------------------------------
class EstesCommodityItem(BaseModel):
    description: str = ""
    pieces: int = 1
    pieceType: str = "CARTON"


class EstesHandlingUnit(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    doNotStack: bool = False
    handlingUnitType: str = "PALLET"
    quantity: int = Field(1, ge=0)
    length: float = 0
    width: float = 0
    height: float = 0
    weight: float = 0
    freightClass: str = Field("", alias="class")
    nmfc: str = ""
    sub: str = ""
    items: List[EstesCommodityItem] = Field(default_factory=list)


class EstesFormState(BaseModel):
    role: str = "Third-Party"
    terms: str = "Prepaid"
    masterBol: str = ""
    shipDate: str = ""
    quoteId: str = ""

    originAccount: str = ""
    originName: str = ""
    originAddress1: str = ""
    originAddress2: str = ""
    originCity: str = ""
    originState: str = ""
    originZipCode: str = ""
    originCountry: str = ""
    originContactName: str = ""
    originPhone: str = ""
    originEmail: str = ""

    destinationName: str = ""
    destinationAddress1: str = ""
    destinationAddress2: str = ""
    destinationCity: str = ""
    destinationState: str = ""
    destinationZipCode: str = ""
    destinationCountry: str = "USA"
    destinationContactName: str = ""
    destinationPhone: str = ""
    destinationEmail: str = ""

    billToAccount: str = ""
    billToName: str = ""
    billToAddress1: str = ""
    billToAddress2: str = ""
    billToCity: str = ""
    billToState: str = ""
    billToZipCode: str = ""
    billToCountry: str = "USA"
    billToContactName: str = ""
    billToPhone: str = ""
    billToEmail: str = ""

    selectedAccessorials: List[str] = Field(default_factory=list)
    specialHandlingRequests: List[str] = Field(default_factory=list)
    handlingUnits: List[EstesHandlingUnit] = Field(default_factory=list)

    billOfLadingNotification: bool = True
    shippingLabelsNotification: bool = True
    trackingUpdatesNotification: bool = True
    shippingLabelFormat: str = "Zebra 4 X 6"
    shippingLabelQuantity: int = 1
    shippingLabelPosition: int = 1
    billOfLadingEmails: List[str] = Field(default_factory=list)
    trackingUpdatesEmails: List[str] = Field(default_factory=list)


# -------------------------------
# XPO BOL form state
# -------------------------------
class XpoLocation(BaseModel):
    company: str = ""
    careOf: str = ""
    streetAddress: str = ""
    addressLine2: str = ""
    city: str = ""
    state: str = ""
    postalCode: str = ""
    country: str = "US"
    phone: str = ""
    extension: str = ""
    email: str = ""


class XpoPackaging(BaseModel):
    model_config = ConfigDict(extra="allow")

    packageCd: str = "PLT"


class XpoGrossWeight(BaseModel):
    model_config = ConfigDict(extra="allow")

    weight: float = 0


class XpoCommodity(BaseModel):
    pieceCnt: int = 0
    packaging: XpoPackaging = Field(default_factory=XpoPackaging)
    grossWeight: XpoGrossWeight = Field(default_factory=XpoGrossWeight)
    desc: str = ""
    nmfcClass: str = ""
    nmfcItemCd: str = ""
    sub: str = ""
    hazmatInd: bool = False


class XpoReference(BaseModel):
    referenceCode: str = "RQ#"
    reference: str = ""
    referenceDescr: Optional[str] = None
    referenceTypeCd: Optional[str] = "Other"


class XpoFormState(BaseModel):
    requesterRole: str = "S"
    paymentTerms: str = "P"

    pickupLocation: XpoLocation = Field(default_factory=XpoLocation)
    deliveryLocation: XpoLocation = Field(default_factory=XpoLocation)
    # None means bill the pickup location
    billTo: Optional[XpoLocation] = None

    commodities: List[XpoCommodity] = Field(default_factory=list)

    emergencyContactName: Optional[str] = ""
    emergencyContactPhone: Optional[str] = ""

    totalDeclaredValue: str = ""
    excessiveLiabilityAuth: str = ""

    selectedPickupServices: List[str] = Field(default_factory=list)
    selectedDeliveryServices: List[str] = Field(default_factory=list)
    selectedPremiumServices: List[str] = Field(default_factory=list)

    schedulePickup: bool = False
    pickupDate: str = ""
    pickupReadyTime: str = ""
    dockCloseTime: str = ""
    contactCompanyName: str = ""
    contactName: str = ""
    contactPhone: str = ""
    contactExtension: str = ""

    proNumberOption: Literal["none", "auto", "preassigned"] = "auto"
    preAssignedProNumber: str = ""

    references: List[XpoReference] = Field(default_factory=list)
    additionalComments: str = ""


# -------------------------------
# XPO pickup request form state
# -------------------------------
class XpoPickupContact(BaseModel):
    companyName: str = ""
    fullName: str = ""
    email: str = ""
    phone: str = ""


class XpoPickupItem(BaseModel):
    destZip: str = ""
    weight: float = 0
    loosePiecesCnt: int = 0
    palletCnt: int = 0
    garntInd: bool = False
    hazmatInd: bool = False
    frzbleInd: bool = False
    holDlvrInd: bool = False
    foodInd: bool = False
    remarks: str = ""


class XpoPickupFormState(BaseModel):
    pickupDate: str = ""
    readyTime: str = ""
    closeTime: str = ""
    specialEquipmentCd: str = ""
    insidePkupInd: Optional[bool] = None
    shipper: XpoLocation = Field(default_factory=XpoLocation)
    requestor: XpoPickupContact = Field(default_factory=XpoPickupContact)
    requestorRoleCd: str = "S"
    contact: XpoPickupContact = Field(default_factory=XpoPickupContact)
    remarks: str = ""
    items: List[XpoPickupItem] = Field(default_factory=list)


# -------------------------------
# API envelopes
# -------------------------------
class CarrierResponse(BaseModel):
    carrier: Carrier


class ShipmentsResponse(BaseModel):
    shipments: List[ShipmentSummary]


class TrackingResponse(BaseModel):
    tracking: Optional[TrackingNumber] = None
    params: TrackingLookupParams = Field(default_factory=TrackingLookupParams)


class RecordSummaryResponse(BaseModel):
    id: Optional[int] = None
    carrier: Carrier
    shipment: Optional[ShipmentSummary] = None
    tracking: Optional[TrackingNumber] = None


class CommodityUpdateRequest(BaseModel):
    form: XpoFormState
    index: int = Field(..., ge=0)
    path: List[str]
    value: Any = None
