from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from outthedoor.models.common import CamelModel
from outthedoor.models.quote import new_id, utc_now


class TimelineEventType(str, Enum):
    QUOTE_SUBMITTED = "quote_submitted"
    QUOTE_PUBLISHED = "quote_published"
    QUOTE_COUNTERED = "quote_countered"
    QUOTE_ACCEPTED = "quote_accepted"
    CONTRACT_UPLOADED = "contract_uploaded"
    CONTRACT_PASS = "contract_pass"
    CONTRACT_MISMATCH = "contract_mismatch"


class TimelineActor(str, Enum):
    BUYER = "buyer"
    DEALER = "dealer"
    OPS = "ops"
    SYSTEM = "system"


class TimelineEvent(CamelModel):
    id: str = Field(default_factory=new_id)
    brief_id: str
    quote_id: Optional[str] = None
    type: TimelineEventType
    actor: TimelineActor
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=utc_now)
