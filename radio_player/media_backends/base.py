from typing import Protocol


class MediaBackend(Protocol):
    def play(self, url: str) -> None:
        pass

    def stop(self) -> None:
        pass

    def is_playing(self) -> bool:
        pass

    def set_volume(self, value: int) -> None:
        pass
