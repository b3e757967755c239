import logging
from typing import Optional

from teleop import event_bus
from teleop.messages import TURN_LIMIT, ManualCommand
from teleop.transport import RobotClient

logger = logging.getLogger(__name__)


class ManualNode:
    """Кнопки и слайдер ручного управления. Без ограничения частоты геймпада."""

    def __init__(self, client: RobotClient) -> None:
        self.client = client
        self.last_command: Optional[ManualCommand] = None

    async def start(self) -> None:
        await event_bus.subscribe("manual/cmd", self._on_manual_cmd)

    async def _on_manual_cmd(self, cmd: ManualCommand) -> None:
        turn = max(-TURN_LIMIT, min(TURN_LIMIT, cmd.turn))
        safe_cmd = ManualCommand(action=cmd.action, turn=turn)
        logger.info(
            "Manual command: action=%s turn=%d",
            safe_cmd.action.value if safe_cmd.action else "-",
            safe_cmd.turn,
        )
        self.last_command = safe_cmd
        self.client.send_manual(safe_cmd)
