import collections
import logging
import threading

from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from typing import Callable, Union

from radio_player.backends.base import BackendClient, BackendUnavailable
from radio_player.conf import settings
from radio_player.types import ControllerEvent, PlaybackState


logger = logging.getLogger(__name__)


class InvalidArgument(ValueError):
    pass


class Busy(Exception):
    pass


class PlaybackController:
    """
    Owns playback state and volume and turns user intent into backend
    commands.

    Playback state only changes to what the backend reports after a toggle.
    Volume is written locally first and then sent, failures do not roll it
    back. Only one toggle may be in flight, a second one raises Busy.
    Backend calls run on a worker pool, every public method returns
    immediately with a Future.

    Events are queued under the state lock and handed to listeners in the
    order the state changed.
    """

    def __init__(
        self,
        backend: BackendClient,
        toggle_timeout: Union[float, None] = None,
        max_workers: Union[int, None] = None,
    ):
        self._backend = backend
        if toggle_timeout is None:
            toggle_timeout = settings.TOGGLE_TIMEOUT
        self._toggle_timeout = toggle_timeout
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.BACKEND_WORKERS,
            thread_name_prefix="radio-backend",
        )
        self._lock = threading.Lock()
        self._state = PlaybackState.STOPPED
        self._volume = 1.0
        # token of the toggle request the caller is waiting on
        self._pending_toggle = None
        # backend call of the last toggle, may outlive a timed-out request
        self._toggle_call = None
        self._listeners = []
        self._events = collections.deque()
        self._emit_lock = threading.Lock()
        self._emitter = None

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self, wait=True):
        self._executor.shutdown(wait=wait)

    @property
    def state(self) -> PlaybackState:
        with self._lock:
            return self._state

    @property
    def volume(self) -> float:
        with self._lock:
            return self._volume

    @property
    def toggle_pending(self) -> bool:
        with self._lock:
            return self._toggle_in_flight()

    def add_listener(self, callback: Callable[..., None]) -> None:
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)

    def remove_listener(self, callback: Callable[..., None]) -> None:
        with self._lock:
            if callback in self._listeners:
                self._listeners.remove(callback)

    def toggle(self) -> "Future[PlaybackState]":
        with self._lock:
            if self._toggle_in_flight():
                raise Busy("Playback toggle already in progress")
            token = self._pending_toggle = object()
            call = self._toggle_call = self._submit(
                self._backend.toggle_playback
            )

        result = Future()
        timer = None
        if self._toggle_timeout:
            timer = threading.Timer(
                self._toggle_timeout,
                self._on_toggle_timeout,
                (token, result),
            )
            timer.daemon = True
            timer.start()
        call.add_done_callback(
            partial(self._on_toggle_done, token, result, timer)
        )
        return result

    def set_volume(self, level: float) -> "Future[None]":
        if (
            isinstance(level, bool)
            or not isinstance(level, (int, float))
            or not 0.0 <= level <= 1.0
        ):
            raise InvalidArgument(
                f"Volume must be a number in [0.0, 1.0], got {level!r}"
            )
        level = float(level)
        with self._lock:
            self._volume = level
            self._events.append(("VOLUME_CHANGED", (level,)))
            call = self._submit(self._backend.set_volume, level)
        self._emit_events()
        return self._track("SET_VOLUME", call)

    def probe(self, name: str) -> "Future[str]":
        call = self._submit(self._backend.probe, name)
        return self._track("GREET", call, log_level=logging.WARNING)

    def _toggle_in_flight(self):
        return self._pending_toggle is not None or (
            self._toggle_call is not None and not self._toggle_call.done()
        )

    def _submit(self, func, *args):
        try:
            return self._executor.submit(func, *args)
        except RuntimeError as e:
            # worker pool is shut down
            call = Future()
            call.set_exception(e)
            return call

    def _track(self, command, call, log_level=logging.ERROR):
        result = Future()
        call.add_done_callback(
            partial(self._on_call_done, command, result, log_level)
        )
        return result

    def _on_call_done(self, command, result, log_level, call):
        try:
            value = call.result()
        except Exception as e:
            self._fail(result, command, self._as_unavailable(command, e), log_level)
        else:
            logger.debug(f"{command} acknowledged")
            result.set_result(value)

    def _on_toggle_done(self, token, result, timer, call):
        if timer is not None:
            timer.cancel()
        try:
            playing = call.result()
        except Exception as e:
            error = self._as_unavailable("TOGGLE_PLAYBACK", e)
            self._resolve_toggle(token, result, error=error)
            return
        if not isinstance(playing, bool):
            error = BackendUnavailable(
                f"TOGGLE_PLAYBACK: unexpected reply {playing!r}"
            )
            self._resolve_toggle(token, result, error=error)
            return
        self._resolve_toggle(token, result, playing=playing)

    def _on_toggle_timeout(self, token, result):
        error = BackendUnavailable(
            f"TOGGLE_PLAYBACK: no reply within {self._toggle_timeout}s"
        )
        self._resolve_toggle(token, result, error=error)

    def _resolve_toggle(self, token, result, playing=None, error=None):
        with self._lock:
            if self._pending_toggle is not token:
                logger.warning("Discarding late reply to TOGGLE_PLAYBACK")
                return
            self._pending_toggle = None
            if error is None:
                self._state = (
                    PlaybackState.PLAYING if playing else PlaybackState.STOPPED
                )
                self._events.append(("PLAYBACK_CHANGED", (self._state,)))
            state = self._state

        if error is not None:
            self._fail(result, "TOGGLE_PLAYBACK", error)
            return
        logger.info(f"Playback is now {state.value}")
        self._emit_events()
        result.set_result(state)

    def _fail(self, result, command, error, log_level=logging.ERROR):
        logger.log(log_level, f"{command} failed: {error}")
        with self._lock:
            self._events.append(("BACKEND_ERROR", (command, error)))
        self._emit_events()
        result.set_exception(error)

    def _emit_events(self) -> None:
        current = threading.current_thread()
        if self._emitter is current:
            # called from a listener, the outer loop delivers the rest
            return
        with self._emit_lock:
            self._emitter = current
            try:
                while True:
                    with self._lock:
                        if not self._events:
                            return
                        event, args = self._events.popleft()
                        listeners = list(self._listeners)
                    self._notify(listeners, event, *args)
            finally:
                self._emitter = None

    @staticmethod
    def _notify(listeners, event: ControllerEvent, *args) -> None:
        for callback in listeners:
            try:
                callback(event, *args)
            except Exception as e:
                logger.error(f"Listener {callback} failed on {event}: {e}")

    @staticmethod
    def _as_unavailable(command, error):
        if isinstance(error, BackendUnavailable):
            return error
        wrapped = BackendUnavailable(f"{command}: {error}")
        wrapped.__cause__ = error
        return wrapped
