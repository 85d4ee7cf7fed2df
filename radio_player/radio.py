import logging

from retrying import retry

from radio_player import client
from radio_player.conf import settings
from radio_player.types import RadioInfo


logger = logging.getLogger(__name__)


class NowPlayingUnavailable(Exception):
    pass


def _should_retry(exception):
    return isinstance(exception, NowPlayingUnavailable)


@retry(
    stop_max_attempt_number=3,
    wait_fixed=500,
    retry_on_exception=_should_retry,
)
def fetch_now_playing() -> RadioInfo:
    response = client.make_request(settings.API_URL, "get")
    if not response:
        raise NowPlayingUnavailable(
            f"Failed to fetch now playing info from {settings.API_URL}"
        )
    try:
        main = response.json()["main"]
        dj_name = main.get("djname") or (main.get("dj") or {}).get("djname")
        info = RadioInfo(
            now_playing=main.get("np") or "",
            listeners=int(main.get("listeners") or 0),
            dj_name=dj_name or "",
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise NowPlayingUnavailable(f"Invalid now playing response: {e}")
    logger.debug(f"Now playing: {info}")
    return info
