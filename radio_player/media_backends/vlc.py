import logging
import vlc


logger = logging.getLogger(__name__)


class MediaBackendError(Exception):
    pass


class MediaBackend:
    NETWORK_CACHING_MS = 1000

    def __init__(self) -> None:
        self._instance = vlc.Instance(
            "--no-video", f"--network-caching={self.NETWORK_CACHING_MS}"
        )
        self._player = self._instance.media_player_new()
        self._volume = 100

    def play(self, url: str) -> None:
        self._player.set_media(self._instance.media_new(url))
        if self._player.play() == -1:
            raise MediaBackendError(f"libvlc failed to play {url}")
        self._player.audio_set_volume(self._volume)

    def stop(self) -> None:
        self._player.stop()

    def is_playing(self) -> bool:
        return bool(self._player.is_playing())

    def set_volume(self, value: int) -> None:
        value = min(max(value, 0), 100)
        self._volume = value
        if self._player.audio_set_volume(value) == -1:
            # no audio output before the first play, applied in play()
            logger.debug(f"libvlc rejected volume {value}")
