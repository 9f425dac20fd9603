from fastapi import APIRouter, Depends

from outthedoor.models.response import TimelineResponse
from outthedoor.services.record_store import RecordStore, get_store
from outthedoor.services.timeline_service import list_events

timeline_router = APIRouter(prefix="/timeline", tags=["Timeline"])


@timeline_router.get("/{brief_id}", response_model=TimelineResponse)
def brief_timeline(brief_id: str, store: RecordStore = Depends(get_store)):
    events = list_events(store, brief_id)
    return TimelineResponse(brief_id=brief_id, count=len(events), events=events)
