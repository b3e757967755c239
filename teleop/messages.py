from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

SPEED_LIMIT = 255
TURN_LIMIT = 100


class EnablePolicy(str, Enum):
    TOGGLE = "toggle"
    DEADMAN = "deadman"


class InputShape(str, Enum):
    SINGLE_STICK = "single_stick"
    TRIGGERS = "triggers"


class CommandEncoding(str, Enum):
    SPEED_TURN = "speed_turn"
    AXES_BUTTONS = "axes_buttons"


class ManualAction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    START = "start"
    STOP = "stop"


class LatchTransition(str, Enum):
    ENABLED = "enabled"
    DISABLED = "disabled"


_NO_BUTTONS: Mapping[int, bool] = MappingProxyType({})


@dataclass(frozen=True)
class DeviceSample:
    axes: tuple[float, ...] = ()  # -1..1
    triggers: tuple[float, ...] = ()  # 0..1
    buttons: Mapping[int, bool] = field(default_factory=lambda: _NO_BUTTONS)
    connected: bool = True
    device_name: str | None = None

    @classmethod
    def zero(cls) -> "DeviceSample":
        return cls(connected=False)

    def axis(self, index: int) -> float:
        if 0 <= index < len(self.axes):
            return self.axes[index]
        return 0.0

    def trigger(self, index: int) -> float:
        if 0 <= index < len(self.triggers):
            return self.triggers[index]
        return 0.0

    def pressed(self, button: int) -> bool:
        return bool(self.buttons.get(button, False))


@dataclass(frozen=True)
class MotionCommand:
    speed: int = 0  # -255..255, sign = direction
    turn: int = 0  # -100..100, sign = left/right

    @classmethod
    def stop(cls) -> "MotionCommand":
        return cls(0, 0)

    @property
    def is_zero(self) -> bool:
        return self.speed == 0 and self.turn == 0


@dataclass(frozen=True)
class CommandPacket:
    """Everything either wire encoding needs for one outbound request."""

    command: MotionCommand
    axis_x: float = 0.0
    axis_y: float = 0.0
    cycle_pressed: bool = False
    enable_pressed: bool = False

    @classmethod
    def stop(cls) -> "CommandPacket":
        return cls(MotionCommand.stop())


@dataclass(frozen=True)
class DriveOutput:
    left: float  # 0..255, display only
    right: float


@dataclass
class ControlState:
    speed_mode_index: int
    enabled: bool = False
    previous_buttons: dict[int, bool] = field(default_factory=dict)
    connected: bool = False


@dataclass
class DispatchState:
    last_sent_at: float | None = None
    idle_timer_armed: bool = False
    input_active: bool = False


@dataclass(frozen=True)
class ManualCommand:
    action: ManualAction | None
    turn: int = 0  # -100..100


@dataclass(frozen=True)
class SessionTelemetry:
    connected: bool
    device_name: str | None
    speed_mode_index: int
    speed_mode: str
    enabled: bool
    axis_x: float
    axis_y: float
    speed: int
    turn: int
    left: float
    right: float
