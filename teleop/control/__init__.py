from teleop.control.deadzone import apply_deadzone, filter_sample
from teleop.control.dispatcher import CommandDispatcher
from teleop.control.enable_latch import EnableLatch
from teleop.control.mapper import MotionMapper, drive_output, round_half_away
from teleop.control.session import ControlSession, StepResult
from teleop.control.shapes import StickLayout, get_shape, list_shapes, register_shape
from teleop.control.speed_mode import SpeedModeSelector

__all__ = [
    "CommandDispatcher",
    "ControlSession",
    "EnableLatch",
    "MotionMapper",
    "SpeedModeSelector",
    "StepResult",
    "StickLayout",
    "apply_deadzone",
    "drive_output",
    "filter_sample",
    "get_shape",
    "list_shapes",
    "register_shape",
    "round_half_away",
]
