import asyncio
import logging
from typing import Optional

from teleop import event_bus
from teleop.config import Config, config
from teleop.control import CommandDispatcher, ControlSession, StepResult
from teleop.input import DeviceSampler, JoystickSource, PygameJoystickSource
from teleop.messages import LatchTransition, ManualAction, ManualCommand, SessionTelemetry
from teleop.transport import RobotClient

logger = logging.getLogger(__name__)


class GamepadNode:
    """Sampling tick loop: gamepad -> control session -> rover."""

    def __init__(
        self,
        cfg: Config = config,
        source: Optional[JoystickSource] = None,
        client: Optional[RobotClient] = None,
    ) -> None:
        self.cfg = cfg
        self.source = source if source is not None else PygameJoystickSource()
        self.client = client if client is not None else RobotClient.from_config(cfg)
        self.sampler = DeviceSampler.from_config(self.source, cfg.gamepad)
        self.dispatcher = CommandDispatcher(
            self.client.send_packet,
            send_interval_s=cfg.dispatch.send_interval_s,
            idle_delay_s=cfg.dispatch.idle_delay_s,
        )
        self.session = ControlSession(
            cfg.gamepad,
            self.dispatcher,
            on_transition=self._announce if cfg.dispatch.announce_enable_actions else None,
        )
        self._task: Optional[asyncio.Task[None]] = None

    async def start(self) -> None:
        logger.info(
            "Gamepad node started: policy=%s shape=%s encoding=%s",
            self.cfg.gamepad.enable_policy.value,
            self.cfg.gamepad.input_shape.value,
            self.cfg.dispatch.encoding.value,
        )
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.session.close()
        await self.client.close()
        close = getattr(self.source, "close", None)
        if close is not None:
            close()

    def tick_once(self) -> StepResult:
        return self.session.tick(self.sampler.sample())

    def telemetry(self) -> SessionTelemetry:
        return self.session.telemetry()

    async def _run(self) -> None:
        interval = self.cfg.gamepad.tick_interval_s
        while True:
            try:
                self.tick_once()
                await event_bus.publish_gamepad_state(self.session.telemetry())
            except Exception:
                logger.exception("Gamepad tick failed")
            await asyncio.sleep(interval)

    def _announce(self, transition: LatchTransition) -> None:
        action = ManualAction.START if transition == LatchTransition.ENABLED else ManualAction.STOP
        self.client.send_manual(ManualCommand(action=action))
