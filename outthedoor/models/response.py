from typing import List, Literal

from outthedoor.models.common import CamelModel
from outthedoor.models.contract import ContractStatus
from outthedoor.models.timeline import TimelineEvent


class MessageResponse(CamelModel):
    message: str


class ShadinessScoreResponse(CamelModel):
    score: int
    level: Literal["low", "medium", "high"]


class ContractUploadResponse(CamelModel):
    contract_id: str
    status: ContractStatus


class TimelineResponse(CamelModel):
    brief_id: str
    count: int
    events: List[TimelineEvent]
