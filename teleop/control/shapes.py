"""Registry для схем ввода (как раскладка геймпада превращается в скорость и поворот)."""

from collections.abc import Callable
from dataclasses import dataclass

from teleop.messages import SPEED_LIMIT, TURN_LIMIT, DeviceSample, InputShape


@dataclass(frozen=True)
class StickLayout:
    """Индексы осей стика в DeviceSample.axes."""

    x_axis: int = 0
    y_axis: int = 1


# (sample, layout, multiplier) -> (speed, turn) до округления и ограничения
ShapeFn = Callable[[DeviceSample, StickLayout, float], tuple[float, float]]

_SHAPES: dict[str, ShapeFn] = {}


def register_shape(name: str):
    """
    Декоратор для регистрации схемы ввода.

    Args:
        name: Уникальное имя схемы

    Returns:
        Декоратор функции

    Example:
        @register_shape("my_shape")
        def my_shape(sample, layout, multiplier):
            return 0.0, 0.0
    """

    def decorator(fn: ShapeFn) -> ShapeFn:
        _SHAPES[name] = fn
        return fn

    return decorator


def get_shape(name: str) -> ShapeFn | None:
    """
    Получить схему ввода по имени.

    Args:
        name: Имя схемы

    Returns:
        Функция схемы или None, если не найдена
    """
    return _SHAPES.get(name)


def list_shapes() -> dict[str, ShapeFn]:
    """Словарь {имя: функция} всех зарегистрированных схем."""
    return _SHAPES.copy()


@register_shape(InputShape.SINGLE_STICK.value)
def single_stick(sample: DeviceSample, layout: StickLayout, multiplier: float) -> tuple[float, float]:
    """Вперёд/назад по оси Y (вверх отрицательный, поэтому инверсия), поворот по оси X."""
    speed = -sample.axis(layout.y_axis) * SPEED_LIMIT * multiplier
    turn = sample.axis(layout.x_axis) * TURN_LIMIT
    return speed, turn


@register_shape(InputShape.TRIGGERS.value)
def triggers(sample: DeviceSample, layout: StickLayout, multiplier: float) -> tuple[float, float]:
    """
    Газ правым триггером, задний ход левым, поворот стиком.

    Триггер вперёд имеет приоритет, если оба активны одновременно.
    """
    forward = sample.trigger(0)
    backward = sample.trigger(1)
    if forward > 0.0:
        speed = forward * SPEED_LIMIT * multiplier
    elif backward > 0.0:
        speed = -backward * SPEED_LIMIT * multiplier
    else:
        speed = 0.0
    turn = sample.axis(layout.x_axis) * TURN_LIMIT
    return speed, turn
