import logging

from radio_player.audio import AudioManager
from radio_player.backends.base import BackendUnavailable
from radio_player.conf import settings
from radio_player.utils import load_backend


logger = logging.getLogger(__name__)


class BackendClient:
    """
    Runs commands in-process against an AudioManager, no `playerd` needed.
    """

    def __init__(self, audio_manager: AudioManager = None):
        if audio_manager is None:
            media_backend = load_backend(settings.MEDIA_BACKEND, "MediaBackend")
            audio_manager = AudioManager(media_backend())
        self._audio_manager = audio_manager

    def probe(self, name: str) -> str:
        return self._call("GREET", self._audio_manager.greet, name)

    def toggle_playback(self) -> bool:
        return self._call("TOGGLE_PLAYBACK", self._audio_manager.toggle_playback)

    def set_volume(self, level: float) -> None:
        self._call("SET_VOLUME", self._audio_manager.set_volume, level)

    @staticmethod
    def _call(name, func, *args):
        try:
            return func(*args)
        except Exception as e:
            logger.debug(f"{name} failed: {e}")
            raise BackendUnavailable(f"{name}: {e}") from e
