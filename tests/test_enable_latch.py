"""Тесты защёлки включения (toggle и dead-man)."""

from teleop.control.enable_latch import EnableLatch
from teleop.messages import ControlState, EnablePolicy, LatchTransition


def _latch(policy: EnablePolicy) -> EnableLatch:
    return EnableLatch(policy, ControlState(speed_mode_index=0), button=5)


def test_toggle_flips_on_rising_edge() -> None:
    """Toggle: каждое нажатие меняет состояние."""
    latch = _latch(EnablePolicy.TOGGLE)

    assert latch.update(True) == LatchTransition.ENABLED
    assert latch.update(True) is None
    assert latch.update(False) is None
    assert latch.enabled is True
    assert latch.update(True) == LatchTransition.DISABLED
    assert latch.enabled is False


def test_toggle_release_keeps_state() -> None:
    """Toggle: отпускание кнопки не выключает ровер."""
    latch = _latch(EnablePolicy.TOGGLE)
    latch.update(True)

    latch.update(False)

    assert latch.enabled is True


def test_deadman_tracks_held_state() -> None:
    """Dead-man: включено ровно пока кнопка удерживается."""
    latch = _latch(EnablePolicy.DEADMAN)

    assert latch.update(True) == LatchTransition.ENABLED
    assert latch.update(True) is None
    assert latch.enabled is True
    assert latch.update(False) == LatchTransition.DISABLED
    assert latch.enabled is False


def test_force_disable() -> None:
    """Принудительное выключение (потеря геймпада)."""
    latch = _latch(EnablePolicy.TOGGLE)
    latch.update(True)

    assert latch.force_disable() == LatchTransition.DISABLED
    assert latch.force_disable() is None
    assert latch.enabled is False
