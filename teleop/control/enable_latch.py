import logging

from teleop.messages import ControlState, EnablePolicy, LatchTransition

logger = logging.getLogger(__name__)


class EnableLatch:
    """
    Safety gate for command emission.

    TOGGLE flips ``enabled`` on each rising edge of the enable button.
    DEADMAN keeps ``enabled`` equal to the held state of the button.
    """

    def __init__(self, policy: EnablePolicy, state: ControlState, button: int) -> None:
        self.policy = EnablePolicy(policy)
        self.button = button
        self._state = state

    @property
    def enabled(self) -> bool:
        return self._state.enabled

    def update(self, pressed: bool) -> LatchTransition | None:
        was_pressed = self._state.previous_buttons.get(self.button, False)
        self._state.previous_buttons[self.button] = pressed

        if self.policy == EnablePolicy.DEADMAN:
            target = pressed
        elif pressed and not was_pressed:
            target = not self._state.enabled
        else:
            return None

        return self._set(target)

    def force_disable(self) -> LatchTransition | None:
        return self._set(False)

    def _set(self, enabled: bool) -> LatchTransition | None:
        if enabled == self._state.enabled:
            return None
        self._state.enabled = enabled
        logger.info("Rover %s (%s)", "enabled" if enabled else "disabled", self.policy.value)
        return LatchTransition.ENABLED if enabled else LatchTransition.DISABLED
