from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional, Union

from pydantic import Field

from outthedoor.models.common import CamelModel, NamedAmount, NamedFee


class QuoteAddon(CamelModel):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    is_optional: bool = False


class Payment(CamelModel):
    type: Literal["cash", "finance", "lease"]
    apr_or_mf: Optional[Decimal] = Field(None, ge=0)
    term_months: Optional[int] = Field(None, ge=12, le=96)
    das_amount: Optional[Decimal] = Field(None, ge=0)


class Confirmations(CamelModel):
    no_unapproved_addons: bool
    incentives_verified: bool
    otd_includes_all_fees: bool


class DealerQuoteInput(CamelModel):
    """Quote as typed by the dealer, including the self-attestations read by the scorer."""

    vin: str = Field(..., min_length=6, max_length=32)
    stock_number: str = Field(..., min_length=1, max_length=64)
    year: int = Field(..., ge=1980, le=2100)
    make: str = Field(..., min_length=2)
    model: str = Field(..., min_length=1)
    trim: str = Field(..., min_length=1)
    ext_color: str = Field(..., min_length=1)
    int_color: str = Field(..., min_length=1)
    eta_date: Optional[datetime] = None
    msrp: Decimal = Field(..., ge=0)
    dealer_discount: Decimal
    doc_fee: Decimal = Field(Decimal("0"), ge=0)
    dmv_fee: Decimal = Field(Decimal("0"), ge=0)
    tire_battery_fee: Decimal = Field(Decimal("0"), ge=0)
    other_fees: List[NamedFee] = Field(default_factory=list)
    incentives: List[NamedAmount] = Field(default_factory=list)
    addons: List[QuoteAddon] = Field(default_factory=list)
    tax_rate: Decimal = Field(..., ge=0, le=1)
    tax_amount: Decimal = Field(..., ge=0)
    otd_total: Decimal = Field(..., ge=0)
    payment: Optional[Payment] = None
    evidence_note: Optional[str] = Field(None, max_length=500)
    confirmations: Confirmations
    requires_credit_pull_for_cash: bool = False
    honors_advertised_vin_price: bool = False


class QuoteSubmissionRequest(CamelModel):
    dealer_id: str
    invite_token: Optional[str] = None
    quote: DealerQuoteInput


class PublishQuoteRequest(CamelModel):
    confidence: Optional[float] = Field(None, ge=0, le=1)
    note: Optional[str] = None


class RemoveAddonsCounter(CamelModel):
    type: Literal["remove_addons"]
    addon_names: List[str] = Field(..., min_length=1)


class MatchTargetCounter(CamelModel):
    type: Literal["match_target"]
    target_otd: Decimal = Field(..., ge=0, alias="targetOTD")


# Told apart by the literal ``type`` tag
CounterRequest = Union[RemoveAddonsCounter, MatchTargetCounter]
