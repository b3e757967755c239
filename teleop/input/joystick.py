"""
Joystick access via pygame.
Keeps a single opened device and follows hotplug events.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Protocol

import pygame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawJoystickState:
    """Unfiltered readout of one joystick, as reported by the driver."""

    name: str
    axes: tuple[float, ...]
    buttons: tuple[bool, ...]


class JoystickSource(Protocol):
    """Интерфейс источника состояния джойстика."""

    def read(self) -> Optional[RawJoystickState]:
        """
        Прочитать текущее состояние первого подключённого устройства.

        Returns:
            Состояние устройства или None, если устройства нет
        """
        ...


class PygameJoystickSource:
    """Reads the first connected joystick through pygame's joystick module."""

    def __init__(self, index: int = 0) -> None:
        self._index = index
        self._joystick: Optional[pygame.joystick.JoystickType] = None
        self._initialized = False

    def _ensure_init(self) -> None:
        """Ленивая инициализация pygame"""
        if self._initialized:
            return
        # Без окна: события джойстика должны приходить и в фоне
        os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
        os.environ.setdefault("SDL_JOYSTICK_ALLOW_BACKGROUND_EVENTS", "1")
        pygame.init()
        pygame.joystick.init()
        self._initialized = True
        logger.info("pygame joystick subsystem initialized")

    def _handle_hotplug(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.JOYDEVICEREMOVED:
                if self._joystick is not None and event.instance_id == self._joystick.get_instance_id():
                    logger.info("Gamepad removed: %s", self._joystick.get_name())
                    self._joystick = None
            elif event.type == pygame.JOYDEVICEADDED and self._joystick is None:
                logger.debug("Joystick device added (index %s)", event.device_index)

    def _acquire(self) -> Optional[pygame.joystick.JoystickType]:
        if self._joystick is not None:
            return self._joystick
        if pygame.joystick.get_count() <= self._index:
            return None
        joystick = pygame.joystick.Joystick(self._index)
        joystick.init()
        logger.info(
            "Gamepad connected: %s (%d axes, %d buttons)",
            joystick.get_name(),
            joystick.get_numaxes(),
            joystick.get_numbuttons(),
        )
        self._joystick = joystick
        return joystick

    def read(self) -> Optional[RawJoystickState]:
        self._ensure_init()
        try:
            self._handle_hotplug()
            joystick = self._acquire()
            if joystick is None:
                return None
            axes = tuple(joystick.get_axis(i) for i in range(joystick.get_numaxes()))
            buttons = tuple(bool(joystick.get_button(i)) for i in range(joystick.get_numbuttons()))
            return RawJoystickState(name=joystick.get_name(), axes=axes, buttons=buttons)
        except pygame.error as exc:
            logger.warning("Failed to read gamepad, treating as disconnected: %s", exc)
            self._joystick = None
            return None

    def close(self) -> None:
        """Освобождение ресурсов при выключении"""
        if not self._initialized:
            return
        self._joystick = None
        pygame.joystick.quit()
        pygame.quit()
        self._initialized = False
