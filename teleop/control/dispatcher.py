import asyncio
import logging
import time
from collections.abc import Callable
from typing import Any, Optional

from teleop.messages import CommandPacket, DispatchState

logger = logging.getLogger(__name__)

SendFn = Callable[[CommandPacket], None]
CallLater = Callable[[float, Callable[[], None]], Any]


class CommandDispatcher:
    """
    Decides which commands actually go out to the rover.

    - Active input (nonzero command) is rate limited to one send per
      ``send_interval_s``; commands inside the window are dropped.
    - Button edges always pass through.
    - When input returns to rest, a one-shot idle timer sends exactly one
      zero command after ``idle_delay_s`` unless new input cancels it.
    - ``stop_now`` sends a zero command immediately.

    ``send`` must not block: it hands the packet to the transport and returns.
    """

    def __init__(
        self,
        send: SendFn,
        send_interval_s: float = 0.1,
        idle_delay_s: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        call_later: Optional[CallLater] = None,
    ) -> None:
        self._send = send
        self.send_interval_s = send_interval_s
        self.idle_delay_s = idle_delay_s
        self._clock = clock
        self._call_later = call_later
        self._idle_handle: Any = None
        self.state = DispatchState()

    def submit(self, packet: CommandPacket, edge: bool = False) -> bool:
        """
        Offer the current tick's command. Returns True if it was sent.

        Args:
            packet: Команда текущего тика
            edge: Команда вызвана фронтом кнопки (не ограничивается по частоте)
        """
        active = not packet.command.is_zero

        if not active and not edge:
            if self.state.input_active:
                self._arm_idle()
            self.state.input_active = False
            return False

        self._cancel_idle()
        self.state.input_active = active

        now = self._clock()
        last = self.state.last_sent_at
        if not edge and last is not None and now - last < self.send_interval_s:
            return False

        self._transmit(packet, now)
        return True

    def stop_now(self) -> None:
        """Send a zero command right away, bypassing the idle delay."""
        self._cancel_idle()
        self.state.input_active = False
        self._transmit(CommandPacket.stop(), self._clock())

    def close(self) -> None:
        self._cancel_idle()

    def _transmit(self, packet: CommandPacket, now: float) -> None:
        self.state.last_sent_at = now
        logger.debug("dispatch speed=%d turn=%d", packet.command.speed, packet.command.turn)
        try:
            self._send(packet)
        except Exception as exc:
            logger.warning("Failed to hand command to transport: %s", exc)

    def _arm_idle(self) -> None:
        self._cancel_idle()
        call_later = self._call_later or asyncio.get_running_loop().call_later
        self._idle_handle = call_later(self.idle_delay_s, self._on_idle)
        self.state.idle_timer_armed = True

    def _cancel_idle(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None
        self.state.idle_timer_armed = False

    def _on_idle(self) -> None:
        self._idle_handle = None
        self.state.idle_timer_armed = False
        logger.debug("Input at rest for %.2fs, sending idle stop", self.idle_delay_s)
        self._transmit(CommandPacket.stop(), self._clock())
