"""Fold a stream of events into final account summaries."""

from typing import Iterable, List, Optional

from .ledger import LedgerEngine
from .models import AccountSummary, Event


def aggregate(events: Iterable[Event], engine: Optional[LedgerEngine] = None) -> List[AccountSummary]:
    """
    Apply events in arrival order and summarize every account seen

    Args:
        events: Finite sequence of events
        engine: Engine to apply events to; a fresh one when omitted

    Returns:
        One AccountSummary per client, ascending by client id
    """
    if engine is None:
        engine = LedgerEngine()
    for event in events:
        engine.process(event)
    return engine.summary()
