import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from teleop.config import GamepadConfig
from teleop.control.deadzone import filter_sample
from teleop.control.dispatcher import CommandDispatcher
from teleop.control.enable_latch import EnableLatch
from teleop.control.mapper import MotionMapper, drive_output
from teleop.control.shapes import StickLayout
from teleop.control.speed_mode import SpeedModeSelector
from teleop.messages import (
    CommandPacket,
    ControlState,
    DeviceSample,
    LatchTransition,
    MotionCommand,
    SessionTelemetry,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepResult:
    sample: DeviceSample  # after deadzone filtering
    command: MotionCommand
    packet: CommandPacket
    edge: bool
    transition: Optional[LatchTransition]
    device_lost: bool


class ControlSession:
    """
    One teleoperation session: owns ControlState and drives the dispatcher.

    ``step`` is the pure sample -> command translation (it only touches
    ControlState). ``tick`` runs ``step`` and then decides what to dispatch.
    """

    def __init__(
        self,
        cfg: GamepadConfig,
        dispatcher: CommandDispatcher,
        on_transition: Optional[Callable[[LatchTransition], None]] = None,
    ) -> None:
        self.cfg = cfg
        self.dispatcher = dispatcher
        self.on_transition = on_transition
        self.state = ControlState(speed_mode_index=cfg.initial_speed_mode)
        self.speed_modes = SpeedModeSelector(cfg.speed_modes, self.state, cfg.cycle_button)
        self.latch = EnableLatch(cfg.enable_policy, self.state, cfg.enable_button)
        self.layout = StickLayout(x_axis=cfg.stick_x_axis, y_axis=cfg.stick_y_axis)
        self.mapper = MotionMapper(cfg.input_shape, self.layout)
        self._last: Optional[StepResult] = None

    def step(self, sample: DeviceSample) -> StepResult:
        filtered = filter_sample(sample, self.cfg.stick_deadzone, self.cfg.trigger_deadzone)

        device_lost = self.state.connected and not filtered.connected
        if filtered.connected and not self.state.connected:
            logger.info("Gamepad session active: %s", filtered.device_name or "unknown device")
        self.state.connected = filtered.connected

        cycle_pressed = filtered.pressed(self.cfg.cycle_button)
        enable_pressed = filtered.pressed(self.cfg.enable_button)

        if filtered.connected:
            mode_changed = self.speed_modes.update(cycle_pressed)
            transition = self.latch.update(enable_pressed)
        else:
            # Кнопки отпущены: после переподключения первое нажатие снова фронт
            self.state.previous_buttons.clear()
            mode_changed = False
            transition = self.latch.force_disable()

        command = self.mapper.map(filtered, self.speed_modes.multiplier, self.state.enabled)
        packet = CommandPacket(
            command=command,
            axis_x=filtered.axis(self.layout.x_axis),
            axis_y=filtered.axis(self.layout.y_axis),
            cycle_pressed=cycle_pressed,
            enable_pressed=enable_pressed,
        )
        edge = mode_changed or transition == LatchTransition.ENABLED

        result = StepResult(
            sample=filtered,
            command=command,
            packet=packet,
            edge=edge,
            transition=transition,
            device_lost=device_lost,
        )
        self._last = result
        return result

    def tick(self, sample: DeviceSample) -> StepResult:
        result = self.step(sample)

        if result.device_lost:
            logger.warning("Gamepad disconnected, stopping rover")
            self.dispatcher.stop_now()
        elif result.transition == LatchTransition.DISABLED:
            self.dispatcher.stop_now()
        elif self.state.enabled:
            self.dispatcher.submit(result.packet, edge=result.edge)

        if result.transition is not None and self.on_transition is not None:
            self.on_transition(result.transition)
        return result

    def close(self) -> None:
        """Stop the rover if it may still be moving and drop pending timers."""
        if self.state.enabled or self.dispatcher.state.input_active or self.dispatcher.state.idle_timer_armed:
            self.latch.force_disable()
            self.dispatcher.stop_now()
        self.dispatcher.close()

    def telemetry(self) -> SessionTelemetry:
        result = self._last
        sample = result.sample if result is not None else DeviceSample.zero()
        command = result.command if result is not None else MotionCommand.stop()
        output = drive_output(command)
        return SessionTelemetry(
            connected=sample.connected,
            device_name=sample.device_name,
            speed_mode_index=self.speed_modes.index,
            speed_mode=self.speed_modes.current.label,
            enabled=self.state.enabled,
            axis_x=sample.axis(self.layout.x_axis),
            axis_y=sample.axis(self.layout.y_axis),
            speed=command.speed,
            turn=command.turn,
            left=output.left,
            right=output.right,
        )
