import json
import logging
import redis
import time
import uuid

from radio_player.backends.base import BackendUnavailable
from radio_player.conf import settings
from radio_player.types import CommandName
from radio_player.utils import get_redis_conn


logger = logging.getLogger(__name__)


class BackendClient:
    """
    Sends commands to a running `playerd` over redis pub/sub and waits for
    its reply on a per-command channel.
    """

    def __init__(self, redis_conn=None, timeout=None):
        self._timeout = timeout or settings.COMMAND_TIMEOUT
        self._redis = redis_conn or get_redis_conn(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            timeout=self._timeout,
        )

    def probe(self, name: str) -> str:
        return self._call("GREET", name)

    def toggle_playback(self) -> bool:
        return self._call("TOGGLE_PLAYBACK")

    def set_volume(self, level: float) -> None:
        self._call("SET_VOLUME", level)

    def _call(self, name: CommandName, *args):
        reply_channel = "{}:{}".format(
            settings.REPLY_REDIS_CHANNEL, uuid.uuid4().hex
        )
        command = json.dumps((name, list(args), reply_channel))
        deadline = time.time() + self._timeout
        try:
            pipe = self._redis.pubsub()
            try:
                pipe.subscribe(reply_channel)
                self._wait_for(pipe, "subscribe", name, deadline)
                if not self._redis.publish(
                    settings.PLAYER_REDIS_CHANNEL, command
                ):
                    raise BackendUnavailable(
                        f"{name}: no player is listening on "
                        f"{settings.PLAYER_REDIS_CHANNEL}"
                    )
                logger.debug(f"Sent {name} command, waiting on {reply_channel}")
                msg = self._wait_for(pipe, "message", name, deadline)
            finally:
                pipe.close()
        except redis.exceptions.RedisError as e:
            raise BackendUnavailable(f"{name}: {e}") from e
        return self._decode_reply(name, msg["data"])

    def _wait_for(self, pipe, msg_type, name, deadline):
        while True:
            remaining = deadline - time.time()
            if remaining <= 0:
                raise BackendUnavailable(
                    f"{name}: no reply within {self._timeout}s"
                )
            msg = pipe.get_message(timeout=remaining)
            if msg and msg["type"] == msg_type:
                return msg

    @staticmethod
    def _decode_reply(name, data):
        try:
            status, result = json.loads(data)
        except (TypeError, ValueError) as e:
            raise BackendUnavailable(f"{name}: malformed reply {data!r}") from e
        if status != "OK":
            raise BackendUnavailable(f"{name}: {result}")
        return result
