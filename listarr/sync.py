"""
Batch sync of a stored list into one target.
"""

import logging
from typing import Callable, List, Optional

from .errors import ListarrError
from .models import Reason, SyncOutcome

logger = logging.getLogger('listarr')


def sync_items(items, orchestrator,
               on_outcome: Optional[Callable[[int, SyncOutcome], None]] = None) -> List[SyncOutcome]:
    """
    Add items one at a time, in order, collecting one outcome per item.

    Items are processed strictly sequentially; the next lookup starts only
    after the previous outcome is final. A failing item never stops the batch.

    Args:
        items: Sequence of ListItem
        orchestrator: AddOrchestrator for the target
        on_outcome: Optional callback(position, outcome) for progress output

    Returns:
        List of SyncOutcome, same length and order as items
    """
    outcomes = []
    for position, item in enumerate(items, 1):
        try:
            outcome = orchestrator.add_item(item, notify=False)
        except ListarrError as e:
            logger.error(f"Error adding {item.spec}: {e}")
            outcome = SyncOutcome(item=item, ok=False, reason=Reason.ERROR, message=str(e))
        outcomes.append(outcome)
        if on_outcome:
            on_outcome(position, outcome)
    return outcomes


def sync_list(store, list_name: str, orchestrator,
              on_outcome: Optional[Callable[[int, SyncOutcome], None]] = None) -> List[SyncOutcome]:
    """
    Sync every item of a stored list into the orchestrator's target.

    The list is read once up front; edits made while the sync runs do not
    affect it.

    Args:
        store: ListStore holding the list
        list_name: Name of the list
        orchestrator: AddOrchestrator for the target
        on_outcome: Optional callback(position, outcome) for progress output

    Returns:
        One SyncOutcome per item, in stored order

    Raises:
        ListStoreError: If the list does not exist
    """
    snapshot = tuple(store.get_items(list_name))
    logger.info(f"Starting sync of {list_name} -> {orchestrator.target.value} ({len(snapshot)} items)")
    outcomes = sync_items(snapshot, orchestrator, on_outcome=on_outcome)
    added = sum(1 for o in outcomes if o.ok)
    logger.info(f"Sync of {list_name} complete: {added}/{len(outcomes)} added")
    return outcomes
