import logging
import threading
import time

from radio_player.conf import settings
from radio_player.media_backends.base import MediaBackend


logger = logging.getLogger(__name__)


class AudioManager:
    STREAM_START_TIMEOUT = 10

    def __init__(
        self, media_backend: MediaBackend, stream_url=None, volume=1.0
    ):
        self._media_backend = media_backend
        self._stream_url = stream_url or settings.STREAM_URL
        self._volume = volume
        self._playing = False
        self._started_at = None
        self._lock = threading.Lock()

    @property
    def is_playing(self) -> bool:
        return self._playing

    @property
    def volume(self) -> float:
        return self._volume

    def greet(self, name: str) -> str:
        return f"Hello, {name}! You've been greeted from the radio player!"

    def toggle_playback(self) -> bool:
        with self._lock:
            if self._playing:
                self._media_backend.stop()
                self._playing = False
                logger.info(f"Stopped playing {self._stream_url}")
                return False
            self._media_backend.set_volume(self._to_media_volume(self._volume))
            self._media_backend.play(self._stream_url)
            self._playing = True
            self._started_at = time.time()
            logger.info(f"Started playing {self._stream_url}")
            return True

    def set_volume(self, level: float) -> None:
        if not 0.0 <= level <= 1.0:
            raise ValueError(f"Volume {level} out of range [0.0, 1.0]")
        with self._lock:
            self._volume = level
            self._media_backend.set_volume(self._to_media_volume(level))
        logger.debug(f"Volume set to {level}")

    def check_stream(self) -> None:
        """
        Reset to stopped if the stream died on its own, so that the next
        toggle starts it again instead of stopping a silent player.
        """
        with self._lock:
            if not self._playing or self._media_backend.is_playing():
                return
            if time.time() - self._started_at < self.STREAM_START_TIMEOUT:
                return
            logger.warning(
                f"Stream {self._stream_url} stopped unexpectedly, "
                f"marking player as stopped"
            )
            self._media_backend.stop()
            self._playing = False

    @staticmethod
    def _to_media_volume(level: float) -> int:
        return round(level * 100)
