"""
Audio handle interface.

The engine only needs to start background music from the beginning and stop
it again; anything that can do that (a pygame mixer channel, a browser bridge)
satisfies AudioHandle.
"""

from __future__ import annotations

from typing import Protocol


class AudioHandle(Protocol):
    """Background music handle."""

    @property
    def is_playing(self) -> bool: ...

    def play(self) -> None: ...

    def pause(self) -> None: ...

    def rewind(self) -> None: ...


class NullAudio:
    """Silent audio handle that only tracks play state."""

    def __init__(self) -> None:
        self._playing = False
        self.play_count = 0
        self.rewind_count = 0

    @property
    def is_playing(self) -> bool:
        return self._playing

    def play(self) -> None:
        self._playing = True
        self.play_count += 1

    def pause(self) -> None:
        self._playing = False

    def rewind(self) -> None:
        self.rewind_count += 1
