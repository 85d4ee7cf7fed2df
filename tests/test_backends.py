import json
import pytest

from unittest import mock

from radio_player.backends.base import BackendUnavailable
from radio_player.backends.local import BackendClient as LocalBackendClient
from radio_player.backends.redis import BackendClient as RedisBackendClient
from radio_player.conf import settings

from .fixtures import audio_manager, media_backend  # noqa: F401


def get_redis_mock(*messages, receivers=1):
    conn = mock.MagicMock()
    conn.publish.return_value = receivers
    pipe = conn.pubsub.return_value
    pipe.get_message.side_effect = list(messages)
    return conn, pipe


def subscribed():
    return {"type": "subscribe", "data": 1}


def reply(status, result):
    return {"type": "message", "data": json.dumps((status, result))}


def test_redis_toggle_playback():
    conn, pipe = get_redis_mock(subscribed(), reply("OK", True))
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    assert client.toggle_playback() is True

    reply_channel = pipe.subscribe.call_args[0][0]
    assert reply_channel.startswith(settings.REPLY_REDIS_CHANNEL + ":")
    channel, command = conn.publish.call_args[0]
    assert channel == settings.PLAYER_REDIS_CHANNEL
    assert json.loads(command) == ["TOGGLE_PLAYBACK", [], reply_channel]
    assert pipe.close.called


def test_redis_set_volume_and_probe():
    conn, pipe = get_redis_mock(
        subscribed(),
        reply("OK", None),
        subscribed(),
        reply("OK", "Hello, radio!"),
    )
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    client.set_volume(0.4)
    assert json.loads(conn.publish.call_args[0][1])[:2] == ["SET_VOLUME", [0.4]]
    assert client.probe("radio") == "Hello, radio!"
    assert json.loads(conn.publish.call_args[0][1])[:2] == ["GREET", ["radio"]]


def test_redis_reply_channels_are_unique():
    conn, pipe = get_redis_mock(
        subscribed(), reply("OK", True), subscribed(), reply("OK", False)
    )
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    client.toggle_playback()
    client.toggle_playback()
    first, second = [c[0][0] for c in pipe.subscribe.call_args_list]
    assert first != second


def test_redis_ignores_unrelated_messages():
    conn, pipe = get_redis_mock(
        None, subscribed(), None, {"type": "pong"}, reply("OK", False)
    )
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    assert client.toggle_playback() is False


def test_redis_error_reply():
    conn, pipe = get_redis_mock(subscribed(), reply("ERROR", "no audio device"))
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    with pytest.raises(BackendUnavailable, match="no audio device"):
        client.toggle_playback()


def test_redis_malformed_reply():
    conn, pipe = get_redis_mock(
        subscribed(), {"type": "message", "data": "not json"}
    )
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    with pytest.raises(BackendUnavailable, match="malformed"):
        client.toggle_playback()


def test_redis_no_player_listening():
    conn, pipe = get_redis_mock(subscribed(), receivers=0)
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    with pytest.raises(BackendUnavailable, match="no player is listening"):
        client.toggle_playback()
    assert pipe.close.called


def test_redis_reply_timeout():
    conn = mock.MagicMock()
    conn.publish.return_value = 1
    pipe = conn.pubsub.return_value

    def get_message(timeout=0.0):
        if not pipe.subscribe_seen:
            pipe.subscribe_seen = True
            return subscribed()
        return None

    pipe.subscribe_seen = False
    pipe.get_message.side_effect = get_message
    client = RedisBackendClient(redis_conn=conn, timeout=0.05)
    with pytest.raises(BackendUnavailable, match="no reply"):
        client.toggle_playback()


def test_redis_connection_error():
    import redis

    conn = mock.MagicMock()
    conn.pubsub.return_value.subscribe.side_effect = (
        redis.exceptions.ConnectionError("Connection refused")
    )
    client = RedisBackendClient(redis_conn=conn, timeout=1)
    with pytest.raises(BackendUnavailable, match="Connection refused"):
        client.set_volume(0.5)


def test_local_backend(audio_manager):
    client = LocalBackendClient(audio_manager)
    assert client.probe("radio").startswith("Hello, radio!")
    assert client.toggle_playback() is True
    client.set_volume(0.5)
    assert audio_manager.volume == 0.5
    assert client.toggle_playback() is False


def test_local_backend_wraps_errors(audio_manager):
    client = LocalBackendClient(audio_manager)
    with pytest.raises(BackendUnavailable, match="SET_VOLUME"):
        client.set_volume(2)


@mock.patch("radio_player.backends.local.load_backend")
def test_local_backend_uses_configured_media_backend(load_backend):
    from radio_player.media_backends.dummy import MediaBackend

    load_backend.return_value = MediaBackend
    client = LocalBackendClient()
    load_backend.assert_called_with(settings.MEDIA_BACKEND, "MediaBackend")
    assert client.toggle_playback() is True
