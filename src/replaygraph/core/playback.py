"""
Playback Controller.

Owns the playback position (0-100), the speed multiplier and the
play/pause state. Position only advances through tick(); every manual
control (pause, seek, reset, jump) pauses playback and starts a new
generation, so ticks scheduled for an earlier play session are discarded.

PlaybackTicker drives tick() from a chain of threading.Timer objects. The
next timer is armed only after the previous tick's update has returned, so
ticks never overlap.
"""

import logging
import threading
from typing import Any, Callable, List, Optional

from pydantic import BaseModel, ConfigDict

from ..config import POSITION_MAX, POSITION_MIN, EngineConfig
from .timeline import clamp_position

logger = logging.getLogger(__name__)

PlaybackListener = Callable[["PlaybackState"], None]


class PlaybackState(BaseModel):
    position: float = POSITION_MIN
    is_playing: bool = False
    speed: int = 1

    model_config = ConfigDict(frozen=True)

    @property
    def at_end(self) -> bool:
        return self.position >= POSITION_MAX


class PlaybackController:
    """
    State machine with two states, Paused and Playing.

    All mutations are serialized by a re-entrant lock, which a session
    may share to make graph swaps and ticks mutually exclusive.
    """

    def __init__(self, config: EngineConfig | None = None, lock: Optional[Any] = None):
        self.config = config or EngineConfig()
        self.lock = lock or threading.RLock()
        self._state = PlaybackState(speed=self.config.speeds[0])
        self._generation = 0
        self._listeners: List[PlaybackListener] = []

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: PlaybackListener) -> None:
        self._listeners.append(listener)

    def _update(self, **changes) -> PlaybackState:
        self._state = self._state.model_copy(update=changes)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def _interrupt(self, **changes) -> PlaybackState:
        self._generation += 1
        return self._update(is_playing=False, **changes)

    # =========================================================================
    # Controls
    # =========================================================================

    def play(self) -> PlaybackState:
        """Start playing. No-op at the end of the timeline."""
        with self.lock:
            if self._state.at_end or self._state.is_playing:
                return self._state
            return self._update(is_playing=True)

    def pause(self) -> PlaybackState:
        with self.lock:
            return self._interrupt()

    def seek(self, position: float) -> PlaybackState:
        """Move to a position. Scrubbing always pauses autoplay."""
        with self.lock:
            return self._interrupt(position=clamp_position(position))

    def reset(self) -> PlaybackState:
        return self.seek(POSITION_MIN)

    def jump_to_end(self) -> PlaybackState:
        return self.seek(POSITION_MAX)

    def restart(self) -> PlaybackState:
        """Return to the initial state; used when the log batch changes."""
        with self.lock:
            return self._interrupt(position=POSITION_MIN, speed=self.config.speeds[0])

    def cycle_speed(self) -> PlaybackState:
        """Advance to the next speed multiplier (1 -> 2 -> 4 -> 1)."""
        with self.lock:
            speeds = self.config.speeds
            try:
                current = speeds.index(self._state.speed)
            except ValueError:
                current = -1
            return self._update(speed=speeds[(current + 1) % len(speeds)])

    def tick(self, generation: int | None = None) -> bool:
        """
        Advance one step while playing.

        A tick tagged with a stale generation is ignored. Returns True if
        the position changed.
        """
        with self.lock:
            if generation is not None and generation != self._generation:
                return False
            if not self._state.is_playing:
                return False

            step = self.config.tick_step * self._state.speed
            position = min(self._state.position + step, POSITION_MAX)
            if position >= POSITION_MAX:
                self._generation += 1
                self._update(position=POSITION_MAX, is_playing=False)
            else:
                self._update(position=position)
            return True

    def run_until_paused(self, max_ticks: int = 10_000) -> int:
        """Tick synchronously until playback stops. Returns the number of ticks applied."""
        ticks = 0
        while self._state.is_playing and ticks < max_ticks:
            self.tick()
            ticks += 1
        return ticks


class PlaybackTicker:
    """
    Fixed-period driver for a PlaybackController.

    Each timer callback applies one tick, then arms the next timer only if
    the same play session is still active.
    """

    def __init__(self, controller: PlaybackController, interval_ms: float | None = None):
        self.controller = controller
        self.interval_ms = interval_ms or controller.config.tick_interval_ms
        self._timer: threading.Timer | None = None
        self._timer_lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._timer is not None

    def start(self) -> None:
        """Play and start ticking."""
        with self.controller.lock:
            state = self.controller.play()
            if not state.is_playing:
                return
            generation = self.controller.generation
        self._arm(generation)

    def stop(self) -> None:
        """Pause and cancel the pending timer."""
        self.controller.pause()
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _arm(self, generation: int) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            timer = threading.Timer(self.interval_ms / 1000.0, self._on_timer, args=(generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def _on_timer(self, generation: int) -> None:
        applied = self.controller.tick(generation=generation)
        with self.controller.lock:
            still_playing = (
                applied
                and self.controller.state.is_playing
                and self.controller.generation == generation
            )
        if still_playing:
            self._arm(generation)
            return

        with self._timer_lock:
            if self._timer is not None and self._timer.args == (generation,):
                self._timer = None
        logger.debug(f"Ticker stopped at position {self.controller.state.position}")
