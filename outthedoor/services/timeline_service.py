from typing import Any, Dict, List, Optional

from outthedoor.core.logger import get_logger
from outthedoor.models.timeline import TimelineActor, TimelineEvent, TimelineEventType
from outthedoor.services.record_store import RecordStore

logger = get_logger(__name__)


def record_event(
    store: RecordStore,
    brief_id: str,
    type: TimelineEventType,
    actor: TimelineActor,
    payload: Optional[Dict[str, Any]] = None,
    quote_id: Optional[str] = None,
) -> Optional[TimelineEvent]:
    """
    Append an event to the brief's timeline.

    Fire-and-forget: a failed append is logged and ``None`` returned, the
    operation that produced the event has already been persisted.
    """
    try:
        event = TimelineEvent(
            brief_id=brief_id,
            quote_id=quote_id,
            type=type,
            actor=actor,
            payload=payload or {},
        )
        store.append_event(event)
    except Exception as e:
        logger.error(f"Failed to record {type.value} event for brief {brief_id}: {e}")
        return None

    logger.info(f"Timeline event {type.value} by {actor.value} on brief {brief_id} (quote={quote_id})")
    return event


def list_events(store: RecordStore, brief_id: str) -> List[TimelineEvent]:
    return store.list_events(brief_id)
