import logging
from collections.abc import Sequence

from teleop.config import SpeedMode
from teleop.messages import ControlState

logger = logging.getLogger(__name__)


class SpeedModeSelector:
    """Cyclic speed-mode index, advanced once per press of the cycle button."""

    def __init__(self, modes: Sequence[SpeedMode], state: ControlState, button: int) -> None:
        if not modes:
            raise ValueError("at least one speed mode is required")
        self.modes = tuple(modes)
        self.button = button
        self._state = state

    @property
    def index(self) -> int:
        return self._state.speed_mode_index

    @property
    def current(self) -> SpeedMode:
        return self.modes[self._state.speed_mode_index]

    @property
    def multiplier(self) -> float:
        return self.current.multiplier

    def update(self, pressed: bool) -> bool:
        """Advance on a rising edge. Returns True if the mode changed."""
        was_pressed = self._state.previous_buttons.get(self.button, False)
        self._state.previous_buttons[self.button] = pressed
        if not pressed or was_pressed:
            return False
        self._state.speed_mode_index = (self._state.speed_mode_index + 1) % len(self.modes)
        logger.info("Speed mode -> %s", self.current.label)
        return True
