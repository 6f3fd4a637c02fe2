from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import Field, field_validator
from backoffice.models.base import ApiModel

class FactorStatus(str, Enum):
    CREATED = "created"
    APPROVED_BY_MANAGER = "approved_by_manager"
    APPROVED_BY_FINANCE = "approved_by_finance"
    CANCELED = "canceled"
    DELETED = "deleted"

class PaymentMethod(str, Enum):
    CASH = "cash"
    CHEQUE = "cheque"

FACTOR_STATUS_DISPLAY_NAMES: Dict[FactorStatus, str] = {
    FactorStatus.CREATED: "ایجاد شده",
    FactorStatus.APPROVED_BY_MANAGER: "تایید شده توسط مدیر",
    FactorStatus.APPROVED_BY_FINANCE: "تایید شده توسط مالی",
    FactorStatus.CANCELED: "لغو شده",
    FactorStatus.DELETED: "حذف شده",
}

FACTOR_STATUS_COLORS: Dict[FactorStatus, str] = {
    FactorStatus.CREATED: "bg-blue-100 text-blue-800",
    FactorStatus.APPROVED_BY_MANAGER: "bg-yellow-100 text-yellow-800",
    FactorStatus.APPROVED_BY_FINANCE: "bg-green-100 text-green-800",
    FactorStatus.CANCELED: "bg-red-100 text-red-800",
    FactorStatus.DELETED: "bg-gray-100 text-gray-800",
}

PAYMENT_METHOD_DISPLAY_NAMES: Dict[PaymentMethod, str] = {
    PaymentMethod.CASH: "نقدی",
    PaymentMethod.CHEQUE: "چک",
}

PAYMENT_METHOD_COLORS: Dict[PaymentMethod, str] = {
    PaymentMethod.CASH: "bg-green-100 text-green-800",
    PaymentMethod.CHEQUE: "bg-purple-100 text-purple-800",
}

# Line items and core fields are frozen once a factor reaches these states.
READ_ONLY_STATUSES = frozenset({FactorStatus.APPROVED_BY_FINANCE, FactorStatus.DELETED})

class StatusBadge(ApiModel):
    status: FactorStatus
    label: str
    color: str

    @classmethod
    def for_status(cls, status: FactorStatus) -> "StatusBadge":
        return cls(
            status=status,
            label=FACTOR_STATUS_DISPLAY_NAMES[status],
            color=FACTOR_STATUS_COLORS[status]
        )

class Tag(ApiModel):
    id: str
    name: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        return str(v)

class Factor(ApiModel):
    """
    An invoice as stored by the remote API.
    `status` is only ever changed through the transition executor.
    """
    id: str
    name: str = ""
    date: str = Field("", description="Jalali date, YYYYMMDD")
    customer_user_id: Optional[str] = None
    creator_user_id: Optional[str] = None
    status: FactorStatus = FactorStatus.CREATED
    orash_factor_id: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    tags: List[Tag] = []

    # Joined account payloads, passed through untouched
    customer_data: Optional[Dict[str, Any]] = None
    creator_data: Optional[Dict[str, Any]] = None

    @field_validator("id", "customer_user_id", "creator_user_id", mode="before")
    @classmethod
    def coerce_ids(cls, v):
        # The API mixes numeric and string identifiers
        return str(v) if v is not None else v

    @property
    def is_editable(self) -> bool:
        return self.status not in READ_ONLY_STATUSES

class FactorCreate(ApiModel):
    """Body for POST /factor."""
    name: str
    date: str
    customer_user_id: str
    creator_user_id: str
    status: FactorStatus = FactorStatus.CREATED
    orash_factor_id: Optional[str] = None
    payment_method: PaymentMethod = PaymentMethod.CASH
    tags: List[str] = []

class FactorUpdate(ApiModel):
    """Descriptive fields editable independently of status."""
    name: Optional[str] = None
    date: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    orash_factor_id: Optional[str] = None
    tags: Optional[List[str]] = None

class FactorFilter(ApiModel):
    name: Optional[str] = None
    status: Optional[FactorStatus] = None
    payment_method: Optional[PaymentMethod] = None
    orash_factor_id: Optional[str] = None
    customer_user_ids: Optional[List[int]] = None

    @property
    def is_empty(self) -> bool:
        return not any([self.name, self.status, self.payment_method, self.orash_factor_id])

class FactorPage(ApiModel):
    items: List[Factor] = []
    count: int = 0
