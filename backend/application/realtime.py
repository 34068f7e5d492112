"""
Change-notification feed.

In-process subscribers are called first, then the change is pushed to
the Channels group `changes.<table>` for websocket clients.
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Optional, Tuple

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from domain.shared.events import ChangeKind, RowChanged

logger = logging.getLogger(__name__)

Handler = Callable[[RowChanged], None]

_subscribers: Dict[Tuple[str, Optional[ChangeKind]], List[Handler]] = defaultdict(list)


def group_name(table: str) -> str:
    return f"changes.{table}"


def subscribe(table: str, event: Optional[ChangeKind], handler: Handler) -> None:
    """Register `handler` for `event` on `table`; `event=None` receives every kind."""
    handlers = _subscribers[(table, event)]
    if handler not in handlers:
        handlers.append(handler)


def unsubscribe(table: str, event: Optional[ChangeKind], handler: Handler) -> None:
    handlers = _subscribers.get((table, event), [])
    if handler in handlers:
        handlers.remove(handler)


def _handlers_for(change: RowChanged) -> List[Handler]:
    return list(_subscribers.get((change.table, change.event), [])) + \
        list(_subscribers.get((change.table, None), []))


def publish_row_change(event, table: str, row: dict) -> RowChanged:
    """
    Deliver a row change to subscribers and websocket groups.

    A failing subscriber is logged and does not stop the others; the
    row change itself has already been committed.
    """
    change = RowChanged(event=ChangeKind(event), table=table, row=row)

    for handler in _handlers_for(change):
        try:
            handler(change)
        except Exception:
            logger.exception("Change subscriber %r failed for %s %s", handler, table, change.event.value)

    channel_layer = get_channel_layer()
    if channel_layer is not None:
        message = change.as_message()
        message['type'] = 'row.change'
        try:
            async_to_sync(channel_layer.group_send)(group_name(table), message)
        except Exception:
            logger.exception("Failed to push %s change to %s", table, group_name(table))

    return change
