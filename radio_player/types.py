import enum

from typing import Any, Literal, TypedDict


class PlaybackState(str, enum.Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


CommandName = Literal["GREET", "TOGGLE_PLAYBACK", "SET_VOLUME"]

ReplyStatus = Literal["OK", "ERROR"]

# [name, args] or [name, args, reply_channel]
Command = list[Any]


ControllerEvent = Literal["PLAYBACK_CHANGED", "VOLUME_CHANGED", "BACKEND_ERROR"]


class RadioInfo(TypedDict):
    now_playing: str
    listeners: int
    dj_name: str
