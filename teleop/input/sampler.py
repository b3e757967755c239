import logging
import math
from collections.abc import Sequence

from teleop.config import GamepadConfig
from teleop.input.joystick import JoystickSource, RawJoystickState
from teleop.messages import DeviceSample

logger = logging.getLogger(__name__)


def _finite(value: object) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


class DeviceSampler:
    """
    Produces one DeviceSample per tick.

    Axes are passed through by hardware index, clamped to -1..1. Triggers are
    picked from the configured axes (forward first, backward second) and
    normalized to 0..1. Anything the driver cannot provide reads as zero.
    """

    def __init__(
        self,
        source: JoystickSource,
        trigger_axes: Sequence[int] = (5, 2),
        triggers_signed: bool = True,
    ) -> None:
        self._source = source
        self._trigger_axes = tuple(trigger_axes)
        self._triggers_signed = triggers_signed

    @classmethod
    def from_config(cls, source: JoystickSource, cfg: GamepadConfig) -> "DeviceSampler":
        return cls(
            source,
            trigger_axes=(cfg.forward_trigger_axis, cfg.backward_trigger_axis),
            triggers_signed=cfg.triggers_signed,
        )

    def sample(self) -> DeviceSample:
        raw = self._source.read()
        if raw is None:
            return DeviceSample.zero()
        return self._build(raw)

    def _build(self, raw: RawJoystickState) -> DeviceSample:
        axes = tuple(_clamp(_finite(v), -1.0, 1.0) for v in raw.axes)
        triggers = tuple(self._trigger(raw, axis) for axis in self._trigger_axes)
        buttons = {i: bool(pressed) for i, pressed in enumerate(raw.buttons)}
        return DeviceSample(
            axes=axes,
            triggers=triggers,
            buttons=buttons,
            connected=True,
            device_name=raw.name,
        )

    def _trigger(self, raw: RawJoystickState, axis: int) -> float:
        if axis >= len(raw.axes):
            logger.debug("Trigger axis %d not reported by %s", axis, raw.name)
            return 0.0
        value = _finite(raw.axes[axis])
        if self._triggers_signed:
            value = (value + 1.0) / 2.0
        return _clamp(value, 0.0, 1.0)
