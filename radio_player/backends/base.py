from typing import Protocol


class BackendUnavailable(Exception):
    pass


class BackendClient(Protocol):
    """
    Command interface of the audio backend. Every call may raise
    BackendUnavailable.
    """

    def probe(self, name: str) -> str:
        pass

    def toggle_playback(self) -> bool:
        """
        :return: playing state after the toggle, as seen by the backend
        """
        pass

    def set_volume(self, level: float) -> None:
        pass
