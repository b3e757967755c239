"""Фильтр мёртвой зоны для осей и триггеров."""

from dataclasses import replace

from teleop.messages import DeviceSample


def apply_deadzone(value: float, threshold: float) -> float:
    """
    Подавить шум около нуля.

    Значения вне мёртвой зоны проходят без изменений (без перемасштабирования),
    поэтому на границе зоны отклик скачкообразный.

    Args:
        value: Сырое значение оси или триггера
        threshold: Порог мёртвой зоны

    Returns:
        0.0 если |value| < threshold, иначе value
    """
    if abs(value) < threshold:
        return 0.0
    return value


def filter_sample(sample: DeviceSample, stick_deadzone: float, trigger_deadzone: float) -> DeviceSample:
    """Вернуть новый сэмпл с мёртвыми зонами, применёнными к каждой оси и триггеру."""
    return replace(
        sample,
        axes=tuple(apply_deadzone(a, stick_deadzone) for a in sample.axes),
        triggers=tuple(apply_deadzone(t, trigger_deadzone) for t in sample.triggers),
    )
