import json
import logging
import traceback

from radio_player.audio import AudioManager
from radio_player.conf import settings
from radio_player.types import Command, ReplyStatus
from radio_player.utils import (
    get_and_decode_redis_message,
    get_redis_conn,
)


logger = logging.getLogger(__name__)


class CommandServer:
    def __init__(self, audio_manager: AudioManager):
        self._audio_manager = audio_manager
        self._redis = get_redis_conn(
            host=settings.REDIS_HOST, port=settings.REDIS_PORT
        )
        self._redis_pipe = self._redis.pubsub()
        self._redis_pipe.subscribe(settings.PLAYER_REDIS_CHANNEL)
        self._command_map = {
            "GREET": self._on_greet,
            "TOGGLE_PLAYBACK": self._on_toggle_playback,
            "SET_VOLUME": self._on_set_volume,
        }

    def run(self):
        counter = 1
        logger.info(
            f"Listening for commands on {settings.PLAYER_REDIS_CHANNEL}"
        )
        while self._should_run():
            command = get_and_decode_redis_message(
                self._redis_pipe, logger, timeout=0.1
            )
            if command:
                self._dispatch_command(command)
            if counter % 100 == 0:
                # check every ~10s if the stream is still alive
                self._audio_manager.check_stream()
                counter = 1
            else:
                counter += 1

    @classmethod
    def _should_run(cls):
        return True

    def _dispatch_command(self, command: Command):
        if (
            not isinstance(command, list)
            or len(command) not in (2, 3)
            or not isinstance(command[0], str)
            or not isinstance(command[1], list)
        ):
            logger.error(f"Received malformed command {command!r}")
            return
        name, args, *rest = command
        reply_to = rest[0] if rest else None
        func = self._command_map.get(name)
        if func is None:
            logger.error(f"Received unknown command {name}")
            self._reply(reply_to, "ERROR", f"Unknown command {name}")
            return
        logger.debug(f"Received {name} command with args {args}")
        try:
            result = func(*args)
        except Exception as e:
            logger.error(
                "Invalid func call {}: {} \n {}".format(
                    func, e, traceback.format_exc()
                )
            )
            self._reply(reply_to, "ERROR", str(e))
        else:
            self._reply(reply_to, "OK", result)

    def _reply(self, reply_to, status: ReplyStatus, result):
        if reply_to is None:
            return
        reply = json.dumps((status, result))
        if not self._redis.publish(reply_to, reply):
            logger.warning(f"Nobody is waiting for reply on {reply_to}")

    # commands
    def _on_greet(self, name):
        return self._audio_manager.greet(name)

    def _on_toggle_playback(self):
        return self._audio_manager.toggle_playback()

    def _on_set_volume(self, level):
        self._audio_manager.set_volume(level)
