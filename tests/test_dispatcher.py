"""Тесты ограничения частоты и таймера простоя."""

from teleop.control.dispatcher import CommandDispatcher
from teleop.messages import CommandPacket, MotionCommand

IDLE = CommandPacket.stop()


def _moving(speed: int = 100, turn: int = 0) -> CommandPacket:
    return CommandPacket(MotionCommand(speed=speed, turn=turn))


def _dispatcher(clock, timers, sent: list, interval: float = 0.1, idle: float = 0.5) -> CommandDispatcher:
    return CommandDispatcher(
        sent.append,
        send_interval_s=interval,
        idle_delay_s=idle,
        clock=clock,
        call_later=timers.call_later,
    )


def test_rate_limit_continuous_stream(clock, timers) -> None:
    """Поток команд каждые 5 мс: не больше одной отправки за 100 мс."""
    sent_at: list[float] = []
    dispatcher = CommandDispatcher(
        lambda packet: sent_at.append(clock.now),
        send_interval_s=0.1,
        idle_delay_s=0.5,
        clock=clock,
        call_later=timers.call_later,
    )

    for i in range(200):
        clock.now = i / 200
        dispatcher.submit(_moving(speed=100 + i % 50))

    assert len(sent_at) >= 9
    for previous, current in zip(sent_at, sent_at[1:]):
        assert current - previous >= 0.1


def test_edges_bypass_rate_limit(clock, timers) -> None:
    """Команды по фронту кнопки всегда проходят."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)

    assert dispatcher.submit(_moving()) is True
    clock.now = 0.01
    assert dispatcher.submit(_moving()) is False
    clock.now = 0.02
    assert dispatcher.submit(_moving(speed=50), edge=True) is True
    clock.now = 0.03
    assert dispatcher.submit(IDLE, edge=True) is True

    assert [p.command.speed for p in sent] == [100, 50, 0]


def test_only_latest_command_in_window_is_sent(clock, timers) -> None:
    """Команды внутри окна отбрасываются, а не копятся."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)

    for i, speed in enumerate([10, 20, 30, 40]):
        clock.now = i * 0.03
        dispatcher.submit(_moving(speed=speed))
    clock.now = 0.12
    dispatcher.submit(_moving(speed=99))

    assert [p.command.speed for p in sent] == [10, 99]


def test_idle_fallback_sends_exactly_one_stop(clock, timers) -> None:
    """После отпускания стика ровно одна нулевая команда через IDLE_DELAY."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)

    dispatcher.submit(_moving())
    clock.now = 0.001
    dispatcher.submit(IDLE)
    assert dispatcher.state.idle_timer_armed is True

    # Опрос продолжается в покое: таймер не перевзводится и ничего не уходит
    for step in range(1, 31):
        timers.advance(0.001 + step * 0.016)
        dispatcher.submit(IDLE)
    assert len(sent) == 1

    timers.advance(0.502)
    assert sent[-1] == IDLE
    assert len(sent) == 2
    assert dispatcher.state.idle_timer_armed is False

    timers.advance(3.0)
    dispatcher.submit(IDLE)
    assert len(sent) == 2


def test_idle_fallback_fires_without_further_ticks(clock, timers) -> None:
    """Нулевая команда уходит, даже если опрос остановился."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)
    dispatcher.submit(_moving())
    clock.now = 0.001
    dispatcher.submit(IDLE)

    timers.advance(0.5)
    assert len(sent) == 1
    timers.advance(0.6)

    assert sent == [_moving(), IDLE]


def test_new_input_cancels_idle_timer(clock, timers) -> None:
    """Новый ввод до срабатывания таймера отменяет его без отправки."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)
    dispatcher.submit(_moving())
    clock.now = 0.2
    dispatcher.submit(IDLE)

    clock.now = 0.4
    dispatcher.submit(_moving(speed=60))
    timers.advance(2.0)

    assert IDLE not in sent
    assert timers.pending == []
    assert dispatcher.state.idle_timer_armed is False


def test_rest_without_prior_input_does_not_arm(clock, timers) -> None:
    """Покой без предшествующего движения не взводит таймер."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)

    for i in range(10):
        clock.now = i * 0.016
        dispatcher.submit(IDLE)

    assert sent == []
    assert timers.handles == []


def test_rearming_replaces_previous_timer(clock, timers) -> None:
    """Одновременно существует только один таймер простоя."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)

    dispatcher.submit(_moving())
    clock.now = 0.1
    dispatcher.submit(IDLE)
    clock.now = 0.2
    dispatcher.submit(_moving())
    clock.now = 0.3
    dispatcher.submit(IDLE)

    assert len(timers.pending) == 1
    timers.advance(5.0)
    assert sent.count(IDLE) == 1


def test_stop_now_bypasses_idle_delay(clock, timers) -> None:
    """stop_now отправляет ноль сразу и снимает таймер."""
    sent: list[CommandPacket] = []
    dispatcher = _dispatcher(clock, timers, sent)
    dispatcher.submit(_moving())
    clock.now = 0.01
    dispatcher.submit(IDLE)

    dispatcher.stop_now()

    assert sent == [_moving(), IDLE]
    assert timers.pending == []
    timers.advance(5.0)
    assert sent == [_moving(), IDLE]


def test_transport_error_does_not_escape(clock, timers) -> None:
    """Ошибка передачи не доходит до цикла опроса."""

    def broken_send(packet: CommandPacket) -> None:
        raise ConnectionError("rover unreachable")

    dispatcher = CommandDispatcher(broken_send, clock=clock, call_later=timers.call_later)

    assert dispatcher.submit(_moving()) is True
    dispatcher.stop_now()
    assert dispatcher.state.last_sent_at == 0.0
