"""
Query-string wire format spoken by the rover's HTTP control endpoint.

Gamepad (speed/turn):    /?gamepad=1&speed=<-255..255>&turn=<-100..100>
Gamepad (axes/buttons):  /?gamepad=1&x=<-1..1>&y=<-1..1>&cycle=<0|1>&enable=<0|1>
Manual:                  /?action=<forward|backward|start|stop>&slider=<-100..100>
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional, Union

from teleop.messages import (
    SPEED_LIMIT,
    TURN_LIMIT,
    CommandEncoding,
    CommandPacket,
    ManualAction,
    ManualCommand,
    MotionCommand,
)


@dataclass(frozen=True)
class GamepadRequest:
    command: MotionCommand


@dataclass(frozen=True)
class GamepadAxesRequest:
    x: float
    y: float
    cycle: bool
    enable: bool


@dataclass(frozen=True)
class ManualRequest:
    command: ManualCommand


ControlRequest = Union[GamepadRequest, GamepadAxesRequest, ManualRequest]


def encode_gamepad_query(packet: CommandPacket, encoding: CommandEncoding) -> dict[str, str]:
    """
    Закодировать команду геймпада в параметры запроса.

    Args:
        packet: Команда и сопутствующее состояние стика/кнопок
        encoding: Формат, выбранный для развёртывания

    Returns:
        Параметры GET-запроса
    """
    if encoding == CommandEncoding.SPEED_TURN:
        return {
            "gamepad": "1",
            "speed": str(packet.command.speed),
            "turn": str(packet.command.turn),
        }
    if encoding == CommandEncoding.AXES_BUTTONS:
        return {
            "gamepad": "1",
            "x": f"{packet.axis_x:.3f}",
            "y": f"{packet.axis_y:.3f}",
            "cycle": "1" if packet.cycle_pressed else "0",
            "enable": "1" if packet.enable_pressed else "0",
        }
    raise ValueError(f"Unsupported command encoding: {encoding}")


def encode_manual_query(cmd: ManualCommand) -> dict[str, str]:
    params = {"slider": str(_clamp_int(cmd.turn, TURN_LIMIT))}
    if cmd.action is not None:
        params = {"action": cmd.action.value, **params}
    return params


def parse_control_query(params: Mapping[str, str]) -> Optional[ControlRequest]:
    """
    Разобрать параметры запроса на стороне ровера.

    Отсутствующие или нечитаемые числа считаются нулём.

    Args:
        params: Параметры GET-запроса

    Returns:
        Запрос геймпада, ручной запрос или None, если управляющих параметров нет
    """
    if params.get("gamepad") == "1":
        if "x" in params or "y" in params:
            return GamepadAxesRequest(
                x=_clamp_float(_to_float(params.get("x")), 1.0),
                y=_clamp_float(_to_float(params.get("y")), 1.0),
                cycle=params.get("cycle") == "1",
                enable=params.get("enable") == "1",
            )
        return GamepadRequest(
            MotionCommand(
                speed=_clamp_int(_to_int(params.get("speed")), SPEED_LIMIT),
                turn=_clamp_int(_to_int(params.get("turn")), TURN_LIMIT),
            )
        )

    action = params.get("action", "")
    if action or "slider" in params:
        try:
            manual_action: Optional[ManualAction] = ManualAction(action) if action else None
        except ValueError:
            manual_action = None
        turn = _clamp_int(_to_int(params.get("slider")), TURN_LIMIT)
        return ManualRequest(ManualCommand(action=manual_action, turn=turn))

    return None


def _to_float(raw: Optional[str]) -> float:
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except ValueError:
        return 0.0
    return value if value == value else 0.0  # NaN


def _to_int(raw: Optional[str]) -> int:
    value = _to_float(raw)
    if value in (float("inf"), float("-inf")):
        return 0
    return int(value)


def _clamp_int(value: int, limit: int) -> int:
    return max(-limit, min(limit, value))


def _clamp_float(value: float, limit: float) -> float:
    return max(-limit, min(limit, value))
