class MediaBackend:

    _is_playing = False
    _volume = 100
    _url = None

    def play(self, url: str) -> None:
        self._url = url
        self._is_playing = True

    def stop(self):
        self._is_playing = False

    def is_playing(self):
        return self._is_playing

    def set_volume(self, value: int):
        self._volume = min(max(value, 0), 100)

    @property
    def volume(self):
        return self._volume

    @property
    def url(self):
        return self._url
