import threading

import pytest

from radio_player.audio import AudioManager
from radio_player.controller import PlaybackController
from radio_player.media_backends.dummy import MediaBackend


class FakeBackend:
    """
    Scriptable BackendClient. Clear `release` or `volume_release` to keep
    toggle or volume requests in flight, set `error` to make every command
    fail.
    """

    def __init__(self):
        self.playing = False
        self.reply = None
        self.error = None
        self.release = threading.Event()
        self.release.set()
        self.toggle_started = threading.Event()
        self.volume_release = threading.Event()
        self.volume_release.set()
        self.toggle_calls = 0
        self.volume_calls = []
        self.probe_calls = []

    def probe(self, name):
        self.probe_calls.append(name)
        if self.error:
            raise self.error
        return f"Hello, {name}!"

    def toggle_playback(self):
        self.toggle_calls += 1
        self.toggle_started.set()
        self.release.wait(5)
        if self.error:
            raise self.error
        if self.reply is not None:
            return self.reply
        self.playing = not self.playing
        return self.playing

    def set_volume(self, level):
        self.volume_calls.append(level)
        self.volume_release.wait(5)
        if self.error:
            raise self.error


@pytest.fixture
def backend():
    backend = FakeBackend()
    yield backend
    backend.release.set()
    backend.volume_release.set()


@pytest.fixture
def controller(backend):
    controller = PlaybackController(backend, toggle_timeout=0)
    yield controller
    controller.close()


@pytest.fixture
def events(controller):
    received = []
    controller.add_listener(lambda name, *args: received.append((name, args)))
    return received


@pytest.fixture
def media_backend():
    return MediaBackend()


@pytest.fixture
def audio_manager(media_backend):
    return AudioManager(media_backend, stream_url="http://stream.test/main.mp3")
