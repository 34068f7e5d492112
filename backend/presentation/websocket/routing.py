"""
WebSocket Routing.

URL routing for WebSocket connections.
"""

from django.urls import re_path
from . import consumers

websocket_urlpatterns = [
    # Row change feed
    re_path(
        r'ws/changes/$',
        consumers.ChangeFeedConsumer.as_asgi()
    ),
]
