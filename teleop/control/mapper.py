import math

from teleop.control.shapes import ShapeFn, StickLayout, get_shape
from teleop.messages import SPEED_LIMIT, TURN_LIMIT, DeviceSample, DriveOutput, InputShape, MotionCommand

TURN_ATTENUATION = 0.9


def round_half_away(value: float) -> int:
    """Round to nearest integer, halves away from zero (127.5 -> 128, -127.5 -> -128)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _finite(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def _clamp(value: int, limit: int) -> int:
    return max(-limit, min(limit, value))


class MotionMapper:
    """Turns a filtered sample into a bounded MotionCommand."""

    def __init__(self, shape: InputShape | str = InputShape.SINGLE_STICK, layout: StickLayout | None = None) -> None:
        name = shape.value if isinstance(shape, InputShape) else shape
        fn: ShapeFn | None = get_shape(name)
        if fn is None:
            raise ValueError(f"Unknown input shape '{name}'")
        self.shape = name
        self._fn = fn
        self.layout = layout or StickLayout()

    def map(self, sample: DeviceSample, multiplier: float, enabled: bool) -> MotionCommand:
        if not enabled:
            return MotionCommand.stop()
        speed, turn = self._fn(sample, self.layout, multiplier)
        return MotionCommand(
            speed=_clamp(round_half_away(_finite(speed)), SPEED_LIMIT),
            turn=_clamp(round_half_away(_finite(turn)), TURN_LIMIT),
        )


def drive_output(command: MotionCommand, k: float = TURN_ATTENUATION) -> DriveOutput:
    """
    Differential-drive split of a command, for display only.

    Both sides start at |speed|; the side on the inside of the turn is
    attenuated by max(0, 1 - |turn| * k) with turn normalized to -1..1.
    """
    magnitude = float(abs(command.speed))
    turn = command.turn / TURN_LIMIT
    factor = max(0.0, 1.0 - abs(turn) * k)
    left = right = magnitude
    if turn > 0:
        right = magnitude * factor
    elif turn < 0:
        left = magnitude * factor
    return DriveOutput(left=left, right=right)
