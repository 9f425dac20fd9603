from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field

from outthedoor.models.common import CamelModel
from outthedoor.models.quote import new_id, utc_now


class ContractStatus(str, Enum):
    UPLOADED = "uploaded"
    CHECKED_OK = "checked_ok"
    MISMATCH = "mismatch"


class CheckResult(CamelModel):
    field: str
    passed: bool = Field(..., alias="pass")
    expected: Any = None
    actual: Any = None
    notes: Optional[str] = None


class Contract(CamelModel):
    id: str = Field(default_factory=new_id)
    quote_id: str
    status: ContractStatus = ContractStatus.UPLOADED
    checks: List[CheckResult] = Field(default_factory=list)
    file_count: int = 0
    reward_applied: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
