"""Чтение состояния геймпада."""

from teleop.input.joystick import JoystickSource, PygameJoystickSource, RawJoystickState
from teleop.input.sampler import DeviceSampler

__all__ = [
    "DeviceSampler",
    "JoystickSource",
    "PygameJoystickSource",
    "RawJoystickState",
]
