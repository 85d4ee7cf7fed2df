import argparse
import logging
import logging.config
import time

from concurrent import futures

from radio_player.audio import AudioManager
from radio_player.backends.base import BackendUnavailable
from radio_player.conf import settings
from radio_player.controller import InvalidArgument, PlaybackController
from radio_player.radio import NowPlayingUnavailable, fetch_now_playing
from radio_player.server import CommandServer
from radio_player.utils import load_backend


logger = logging.getLogger(__name__)


def setup_logging():
    logging.config.dictConfig(settings.LOGGING_CONFIG)


def playerd():
    setup_logging()
    media_backend = load_backend(settings.MEDIA_BACKEND, "MediaBackend")
    server = CommandServer(AudioManager(media_backend()))
    try:
        server.run()
    except KeyboardInterrupt:
        logger.info("Player stopped")
    return 0


def get_controller():
    backend = load_backend(settings.BACKEND_CLIENT, "BackendClient")
    return PlaybackController(backend())


def _wait(future):
    # give the transport a moment on top of its own timeout
    return future.result(timeout=settings.COMMAND_TIMEOUT + 1)


def _print_info(info):
    print(info["now_playing"])
    print(f"Listeners: {info['listeners']}")
    print(f"DJ: {info['dj_name']}")


def _now_playing(watch=False):
    try:
        while True:
            try:
                _print_info(fetch_now_playing())
            except NowPlayingUnavailable as e:
                print(f"Error: {e}")
                if not watch:
                    return 1
            if not watch:
                return 0
            time.sleep(settings.NOW_PLAYING_INTERVAL)
    except KeyboardInterrupt:
        return 0


def playerctl(argv=None):
    parser = argparse.ArgumentParser(
        prog="playerctl", description="Control the radio player."
    )
    commands = parser.add_subparsers(dest="command", required=True)
    probe = commands.add_parser("probe", help="check the player responds")
    probe.add_argument("name")
    commands.add_parser("toggle", help="start or stop the stream")
    volume = commands.add_parser("volume", help="set volume (0.0 - 1.0)")
    volume.add_argument("level", type=float)
    now_playing = commands.add_parser("now-playing", help="show what's on air")
    now_playing.add_argument(
        "--watch",
        action="store_true",
        help="keep refreshing until interrupted",
    )
    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "now-playing":
        return _now_playing(args.watch)

    with get_controller() as controller:
        try:
            if args.command == "probe":
                print(_wait(controller.probe(args.name)))
            elif args.command == "toggle":
                state = _wait(controller.toggle())
                print(state.value)
            elif args.command == "volume":
                _wait(controller.set_volume(args.level))
                print(f"Volume: {controller.volume}")
        except InvalidArgument as e:
            print(f"Error: {e}")
            return 2
        except BackendUnavailable as e:
            print(f"Error: {e}")
            return 1
        except futures.TimeoutError:
            print(f"Error: no reply within {settings.COMMAND_TIMEOUT + 1}s")
            return 1
    return 0
