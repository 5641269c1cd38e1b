"""
Playback controller stepping through precomputed animation frames.

The controller never reads a clock itself: callers pass a monotonic
timestamp to every call, which keeps it usable from any timer and easy to
drive in tests. State is just the frame cursor, so playback can be paused or
cancelled between any two ticks.
"""
import math
from enum import Enum
from typing import List, Optional

from core.trajectory import AnimationFrame


class PlaybackState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


class SimulationController:
    def __init__(self, frames: List[AnimationFrame], frame_interval: float = 1.0 / 60.0):
        if frame_interval <= 0:
            raise ValueError(f"Frame interval must be positive, got {frame_interval}")
        self.frames = frames
        self.frame_interval = frame_interval
        self.cursor = 0
        self.state = PlaybackState.IDLE
        self._started_at = 0.0
        self._paused_at = 0.0

    @property
    def current_frame(self) -> Optional[AnimationFrame]:
        if not self.frames:
            return None
        return self.frames[self.cursor]

    @property
    def progress(self) -> float:
        """Fraction of frames played, 0.0 to 1.0."""
        if len(self.frames) <= 1:
            return 1.0 if self.state == PlaybackState.FINISHED else 0.0
        return self.cursor / (len(self.frames) - 1)

    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING

    def start(self, now: float):
        """Start from the current cursor position."""
        if not self.frames:
            self.state = PlaybackState.FINISHED
            return
        if self.state == PlaybackState.FINISHED:
            self.cursor = 0
        self._started_at = now - self.cursor * self.frame_interval
        self.state = PlaybackState.PLAYING

    def pause(self, now: float):
        if self.state == PlaybackState.PLAYING:
            self._paused_at = now
            self.state = PlaybackState.PAUSED

    def resume(self, now: float):
        if self.state == PlaybackState.PAUSED:
            self._started_at += now - self._paused_at
            self.state = PlaybackState.PLAYING

    def stop(self):
        """Cancel playback, leaving the cursor where it is."""
        if self.state in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            self.state = PlaybackState.IDLE

    def reset(self):
        self.cursor = 0
        self.state = PlaybackState.IDLE

    def seek(self, index: int, now: float = 0.0):
        """
        Move the cursor. Playing or paused playback continues from the new
        frame; `now` is only read while playing.
        """
        if not self.frames:
            return
        self.cursor = min(max(index, 0), len(self.frames) - 1)
        if self.state == PlaybackState.PLAYING:
            self._started_at = now - self.cursor * self.frame_interval
        elif self.state == PlaybackState.PAUSED:
            self._started_at = self._paused_at - self.cursor * self.frame_interval
        elif self.state == PlaybackState.FINISHED:
            self.state = PlaybackState.IDLE

    def tick(self, now: float) -> List[AnimationFrame]:
        """
        Advance toward the frame due at `now`.

        Returns every frame stepped over, in order, so observers see each
        intermediate frame once. Returns an empty list when not playing.
        """
        if self.state != PlaybackState.PLAYING:
            return []

        elapsed = now - self._started_at
        last_index = len(self.frames) - 1
        target = min(math.floor(elapsed / self.frame_interval), last_index)

        emitted = []
        while self.cursor < target:
            self.cursor += 1
            emitted.append(self.frames[self.cursor])

        if self.cursor >= last_index:
            self.state = PlaybackState.FINISHED
        return emitted
