"""
WebSocket Consumers.

Row change feed for BOQ, breakdown, WIR and roster tables.
"""

import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from application.realtime import group_name

logger = logging.getLogger(__name__)

FEED_TABLES = frozenset({
    'boq_items',
    'breakdown_items',
    'wirs',
    'contractors',
    'engineers',
    'attachments',
})


class BaseConsumer(AsyncJsonWebsocketConsumer):
    """Base consumer with common functionality."""

    async def connect(self):
        """Connect to WebSocket."""
        self.user = self.scope.get('user')

        if not self.user or not self.user.is_authenticated:
            await self.close(code=4001)
            return

        await self.accept()

    async def send_error(self, message: str):
        """Send error message."""
        await self.send_json({
            'type': 'error',
            'message': message
        })


class ChangeFeedConsumer(BaseConsumer):
    """
    WebSocket consumer for row changes.

    Client messages:
    - {"type": "subscribe", "table": "wirs"}
    - {"type": "unsubscribe", "table": "wirs"}
    - {"type": "ping"}

    Server messages:
    - {"type": "subscribed" | "unsubscribed", "table": ...}
    - {"type": "row_change", "event", "table", "row", "timestamp"}
    - {"type": "pong"}
    """

    async def connect(self):
        self.tables = set()
        await super().connect()

    async def disconnect(self, close_code):
        """Leave every subscribed group."""
        for table in list(getattr(self, 'tables', ())):
            await self.channel_layer.group_discard(group_name(table), self.channel_name)
        self.tables = set()

    async def receive_json(self, content):
        """Handle incoming messages."""
        message_type = content.get('type')

        if message_type == 'ping':
            await self.send_json({'type': 'pong'})
            return

        if message_type not in ('subscribe', 'unsubscribe'):
            await self.send_error(f'Unknown message type: {message_type}')
            return

        table = content.get('table')
        if table not in FEED_TABLES:
            await self.send_error(f'Unknown table: {table}')
            return

        if message_type == 'subscribe':
            await self.channel_layer.group_add(group_name(table), self.channel_name)
            self.tables.add(table)
            logger.debug("User %s subscribed to %s", self.user, table)
            await self.send_json({'type': 'subscribed', 'table': table})
        else:
            await self.channel_layer.group_discard(group_name(table), self.channel_name)
            self.tables.discard(table)
            await self.send_json({'type': 'unsubscribed', 'table': table})

    # Event handlers (called by channel layer)

    async def row_change(self, event):
        """Handle a committed insert, update or delete."""
        await self.send_json({
            'type': 'row_change',
            'event': event['event'],
            'table': event['table'],
            'row': event['row'],
            'timestamp': event.get('timestamp'),
        })
