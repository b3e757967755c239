"""Общие заглушки: управляемые часы и таймеры вместо asyncio."""

from collections.abc import Callable

import pytest

from teleop.messages import DeviceSample


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _Handle:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimers:
    """Замена loop.call_later: таймеры срабатывают только при advance()."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.handles: list[_Handle] = []

    def call_later(self, delay: float, callback: Callable[[], None]) -> _Handle:
        handle = _Handle(self.clock.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[_Handle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, to: float) -> None:
        due = sorted(
            (h for h in self.pending if h.when <= to), key=lambda h: h.when
        )
        for handle in due:
            self.clock.now = handle.when
            self.handles.remove(handle)
            handle.callback()
        self.clock.now = to


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def timers(clock: FakeClock) -> FakeTimers:
    return FakeTimers(clock)


def pad(
    x: float = 0.0,
    y: float = 0.0,
    buttons: tuple[int, ...] = (),
    triggers: tuple[float, float] = (0.0, 0.0),
) -> DeviceSample:
    """Сэмпл подключённого геймпада с заданными осями и нажатыми кнопками."""
    return DeviceSample(
        axes=(x, y),
        triggers=triggers,
        buttons={b: True for b in buttons},
        connected=True,
        device_name="Test Pad",
    )
