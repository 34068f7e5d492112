import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from channels.routing import URLRouter
from channels.testing import WebsocketCommunicator
from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser

from application.realtime import group_name
from presentation.websocket.routing import websocket_urlpatterns

# channels >= 4.2 closes stale DB connections on every dispatch.
pytestmark = pytest.mark.django_db


def communicator_for(user):
    communicator = WebsocketCommunicator(URLRouter(websocket_urlpatterns), '/ws/changes/')
    communicator.scope['user'] = user
    return communicator


def test_anonymous_connection_is_refused():
    async def scenario():
        communicator = communicator_for(AnonymousUser())
        connected, code = await communicator.connect()
        return connected, code

    connected, code = async_to_sync(scenario)()

    assert not connected
    assert code == 4001


def test_subscribe_and_receive_row_changes():
    user = get_user_model()(username='inspector')

    async def scenario():
        communicator = communicator_for(user)
        connected, _ = await communicator.connect()
        assert connected

        await communicator.send_json_to({'type': 'ping'})
        pong = await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'subscribe', 'table': 'wirs'})
        subscribed = await communicator.receive_json_from()

        await get_channel_layer().group_send(group_name('wirs'), {
            'type': 'row.change',
            'event': 'update',
            'table': 'wirs',
            'row': {'id': 'abc', 'status': 'completed'},
            'timestamp': '2025-02-03T10:00:00+00:00',
        })
        change = await communicator.receive_json_from()

        await communicator.send_json_to({'type': 'unsubscribe', 'table': 'wirs'})
        unsubscribed = await communicator.receive_json_from()

        await get_channel_layer().group_send(group_name('wirs'), {
            'type': 'row.change',
            'event': 'delete',
            'table': 'wirs',
            'row': {'id': 'abc'},
        })
        silent = await communicator.receive_nothing()

        await communicator.disconnect()
        return pong, subscribed, change, unsubscribed, silent

    pong, subscribed, change, unsubscribed, silent = async_to_sync(scenario)()

    assert pong == {'type': 'pong'}
    assert subscribed == {'type': 'subscribed', 'table': 'wirs'}
    assert change == {
        'type': 'row_change',
        'event': 'update',
        'table': 'wirs',
        'row': {'id': 'abc', 'status': 'completed'},
        'timestamp': '2025-02-03T10:00:00+00:00',
    }
    assert unsubscribed == {'type': 'unsubscribed', 'table': 'wirs'}
    assert silent


def test_unknown_table_is_an_error():
    user = get_user_model()(username='inspector')

    async def scenario():
        communicator = communicator_for(user)
        await communicator.connect()
        await communicator.send_json_to({'type': 'subscribe', 'table': 'auth_user'})
        reply = await communicator.receive_json_from()
        await communicator.disconnect()
        return reply

    reply = async_to_sync(scenario)()

    assert reply['type'] == 'error'
    assert 'auth_user' in reply['message']
