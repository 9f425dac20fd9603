from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import EmailStr, Field

from outthedoor.models.common import CamelModel


def new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QuoteLineKind(str, Enum):
    FEE = "fee"
    INCENTIVE = "incentive"
    ADDON = "addon"


class QuoteStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    COUNTERED = "countered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class QuoteLine(CamelModel):
    kind: QuoteLineKind
    name: str
    amount: Decimal
    approved_by_buyer: bool = False  # addons only
    is_optional: bool = False  # addons only


class Dealer(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    contact_name: Optional[str] = None
    contact_email: EmailStr


class Quote(CamelModel):
    """Ops-approved record of a dealer offer; the reference side of every contract check."""

    id: str = Field(default_factory=new_id)
    brief_id: str
    dealer_id: Optional[str] = None
    invite_token: Optional[str] = None
    status: QuoteStatus = QuoteStatus.DRAFT

    vin: Optional[str] = None
    stock_number: Optional[str] = None
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    trim: Optional[str] = None

    msrp: Optional[Decimal] = None
    dealer_discount: Optional[Decimal] = None
    doc_fee: Optional[Decimal] = None
    dmv_fee: Optional[Decimal] = None
    tire_battery_fee: Optional[Decimal] = None
    tax_rate: Optional[Decimal] = None
    tax_amount: Optional[Decimal] = None
    otd_total: Optional[Decimal] = None
    lines: List[QuoteLine] = Field(default_factory=list)

    shadiness_score: int = Field(0, ge=0)
    confidence: Optional[float] = None
    ops_note: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def lines_of(self, kind: QuoteLineKind) -> List[QuoteLine]:
        return [line for line in self.lines if line.kind == kind]

    def summary(self) -> str:
        return " ".join(str(part) for part in (self.year, self.make, self.model) if part).strip()
