"""Тесты для конфигурации сессии управления."""

import pytest
from pydantic import ValidationError

from teleop.config import Config, DispatchConfig, GamepadConfig, SpeedMode
from teleop.messages import CommandEncoding, EnablePolicy, InputShape


def test_config_defaults() -> None:
    """Проверка дефолтных значений Config."""
    config = Config()

    assert config.gamepad.enable_policy == EnablePolicy.TOGGLE
    assert config.gamepad.input_shape == InputShape.SINGLE_STICK
    assert [m.multiplier for m in config.gamepad.speed_modes] == [0.5, 0.8, 1.0]
    assert config.gamepad.initial_speed_mode == 1
    assert config.gamepad.stick_deadzone == 0.15
    assert config.gamepad.trigger_deadzone == 0.05
    assert config.dispatch.send_interval_s == 0.1
    assert config.dispatch.idle_delay_s == 0.5
    assert config.dispatch.encoding == CommandEncoding.SPEED_TURN


def test_enable_policy_must_be_explicit() -> None:
    """Политику включения нельзя пропустить."""
    with pytest.raises(ValidationError):
        GamepadConfig()  # type: ignore[call-arg]


def test_enable_policy_from_string() -> None:
    """Политика задаётся строкой из конфигурации."""
    config = GamepadConfig(enable_policy="deadman")

    assert config.enable_policy == EnablePolicy.DEADMAN


def test_same_cycle_and_enable_button_rejected() -> None:
    """Одна кнопка не может быть и переключателем скорости, и включением."""
    with pytest.raises(ValidationError):
        GamepadConfig(enable_policy="toggle", cycle_button=3, enable_button=3)


def test_initial_speed_mode_out_of_range_rejected() -> None:
    """Стартовый режим должен существовать."""
    with pytest.raises(ValidationError):
        GamepadConfig(enable_policy="toggle", initial_speed_mode=3)


def test_empty_speed_modes_rejected() -> None:
    """Хотя бы один режим скорости обязателен."""
    with pytest.raises(ValidationError):
        GamepadConfig(enable_policy="toggle", speed_modes=[])


def test_four_speed_modes_accepted() -> None:
    """Вариант с четырьмя режимами."""
    modes = [SpeedMode(label=f"{p}%", multiplier=p / 100) for p in (25, 50, 75, 100)]

    config = GamepadConfig(enable_policy="toggle", speed_modes=modes, initial_speed_mode=3)

    assert len(config.speed_modes) == 4


def test_triggers_shape_needs_distinct_axes() -> None:
    """Схема с триггерами требует две разные оси."""
    with pytest.raises(ValidationError):
        GamepadConfig(
            enable_policy="toggle",
            input_shape="triggers",
            forward_trigger_axis=2,
            backward_trigger_axis=2,
        )


@pytest.mark.parametrize("deadzone", [-0.1, 1.0, 1.5])
def test_deadzone_bounds(deadzone: float) -> None:
    """Мёртвая зона лежит в [0, 1)."""
    with pytest.raises(ValidationError):
        GamepadConfig(enable_policy="toggle", stick_deadzone=deadzone)


def test_idle_delay_must_exceed_send_interval() -> None:
    """Таймер простоя длиннее интервала отправки."""
    with pytest.raises(ValidationError):
        DispatchConfig(send_interval_s=0.2, idle_delay_s=0.1)


def test_axes_encoding_with_triggers_shape_rejected() -> None:
    """Кодирование осями не передаёт триггеры."""
    with pytest.raises(ValidationError):
        Config(
            gamepad=GamepadConfig(enable_policy="toggle", input_shape="triggers"),
            dispatch=DispatchConfig(encoding="axes_buttons"),
        )
