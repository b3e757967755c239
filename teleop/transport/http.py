"""
HTTP transport to the rover.
Every request is fire-and-forget: failures are logged and dropped, never retried.
"""

import asyncio
import logging
from collections.abc import Coroutine
from typing import Any, Optional

import aiohttp

from teleop.config import Config
from teleop.messages import CommandEncoding, CommandPacket, ManualCommand
from teleop.protocol import encode_gamepad_query, encode_manual_query

logger = logging.getLogger(__name__)


class RobotClient:
    def __init__(
        self,
        base_url: str,
        timeout_s: float = 1.0,
        encoding: CommandEncoding = CommandEncoding.SPEED_TURN,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.encoding = encoding
        self._session: Optional[aiohttp.ClientSession] = None
        self._tasks: set[asyncio.Task[Any]] = set()
        self._gamepad_task: Optional[asyncio.Task[Any]] = None
        self._gamepad_started = False

    @classmethod
    def from_config(cls, cfg: Config) -> "RobotClient":
        return cls(
            cfg.robot.base_url,
            timeout_s=cfg.robot.request_timeout_s,
            encoding=cfg.dispatch.encoding,
        )

    def send_packet(self, packet: CommandPacket) -> None:
        """Queue a gamepad command. An older command that has not started yet is dropped."""
        if self._gamepad_task is not None and not self._gamepad_started:
            self._gamepad_task.cancel()
        params = encode_gamepad_query(packet, self.encoding)
        self._gamepad_started = False
        self._gamepad_task = self._spawn(self._send_gamepad(params))

    def send_manual(self, cmd: ManualCommand) -> None:
        """Queue a manual action. Independent from the gamepad channel."""
        self._spawn(self._get(encode_manual_query(cmd)))

    def _spawn(self, coro: Coroutine[Any, Any, bool]) -> asyncio.Task[bool]:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _send_gamepad(self, params: dict[str, str]) -> bool:
        # Начатый запрос не отменяется: обрыв соединения дороже устаревшей команды
        self._gamepad_started = True
        return await self._get(params)

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout_s)
            )
        return self._session

    async def _get(self, params: dict[str, str]) -> bool:
        session = self._ensure_session()
        try:
            async with session.get(f"{self.base_url}/", params=params) as resp:
                await resp.read()
                if resp.status >= 400:
                    logger.warning("Rover rejected %s with HTTP %d", params, resp.status)
                    return False
                return True
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            logger.warning("Command %s to %s failed: %s", params, self.base_url, exc)
            return False

    async def close(self) -> None:
        """Дождаться отправки команд в полёте и закрыть сессию"""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        if self._session is not None:
            await self._session.close()
            self._session = None
