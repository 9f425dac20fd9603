from decimal import Decimal
from typing import List

from pydantic import Field

from outthedoor.models.common import CamelModel, NamedAmount, NamedFee


class ContractFees(CamelModel):
    doc_fee: Decimal = Field(Decimal("0"), ge=0)
    dmv_fee: Decimal = Field(Decimal("0"), ge=0)
    tire_battery_fee: Decimal = Field(Decimal("0"), ge=0)
    other_fees: List[NamedFee] = Field(default_factory=list)


class ContractAddon(CamelModel):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
    approved_by_buyer: bool


class ContractDiffInput(CamelModel):
    """Figures the dealer's signed contract claims, checked against the accepted quote."""

    vin: str = Field(..., min_length=6)
    year: int
    make: str = Field(..., min_length=1)
    model: str = Field(..., min_length=1)
    trim: str = Field(..., min_length=1)
    msrp: Decimal = Field(..., ge=0)
    dealer_discount: Decimal
    incentives: List[NamedAmount] = Field(default_factory=list)
    fees: ContractFees
    addons: List[ContractAddon] = Field(default_factory=list)
    tax_rate: Decimal = Field(..., ge=0, le=1)
    tax_amount: Decimal = Field(..., ge=0)
    otd_total: Decimal = Field(..., ge=0)


class ContractUploadRequest(CamelModel):
    quote_id: str
    file_names: List[str] = Field(default_factory=list)
