from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for payloads exchanged as camelCase JSON (``docFee``, ``otdTotal``)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NamedAmount(CamelModel):
    name: str = Field(..., min_length=1)
    amount: Decimal


class NamedFee(CamelModel):
    name: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0)
