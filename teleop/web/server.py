import asyncio
import logging
from dataclasses import asdict
from typing import Any, Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from teleop import event_bus
from teleop.config import config
from teleop.messages import ManualAction, ManualCommand, SessionTelemetry
from teleop.nodes.gamepad import GamepadNode
from teleop.nodes.manual import ManualNode

logger = logging.getLogger(__name__)

app = FastAPI()

gamepad_node = GamepadNode()
manual_node = ManualNode(gamepad_node.client)


@app.on_event("startup")
async def on_startup() -> None:
    await manual_node.start()
    await gamepad_node.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    logger.info("Shutting down, stopping rover")
    await gamepad_node.stop()


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/config")
async def get_config() -> dict[str, Any]:
    """Получить конфигурацию для фронтенда"""
    return {
        "gamepad": {
            "enable_policy": config.gamepad.enable_policy.value,
            "input_shape": config.gamepad.input_shape.value,
            "speed_modes": [mode.model_dump() for mode in config.gamepad.speed_modes],
            "tick_interval_ms": round(config.gamepad.tick_interval_s * 1000),
            "stick_deadzone": config.gamepad.stick_deadzone,
            "trigger_deadzone": config.gamepad.trigger_deadzone,
        },
        "dispatch": {
            "send_interval_ms": round(config.dispatch.send_interval_s * 1000),
            "idle_delay_ms": round(config.dispatch.idle_delay_s * 1000),
            "encoding": config.dispatch.encoding.value,
        },
        "robot": {"base_url": config.robot.base_url},
    }


@app.get("/api/state")
async def get_state() -> dict[str, Any]:
    return asdict(gamepad_node.telemetry())


class ManualRequestBody(BaseModel):
    action: Optional[ManualAction] = None
    turn: int = Field(0, ge=-100, le=100)


@app.post("/api/manual")
async def manual_command(body: ManualRequestBody) -> dict[str, str]:
    await event_bus.publish_manual_cmd(ManualCommand(action=body.action, turn=body.turn))
    return {"status": "ok"}


@app.websocket("/ws/state")
async def ws_state(ws: WebSocket) -> None:
    await ws.accept()
    # Только последнее состояние: медленный клиент пропускает промежуточные
    latest: asyncio.Queue[SessionTelemetry] = asyncio.Queue(maxsize=1)

    async def _on_state(state: SessionTelemetry) -> None:
        if latest.full():
            latest.get_nowait()
        latest.put_nowait(state)

    await event_bus.subscribe("gamepad/state", _on_state)
    try:
        while True:
            state = await latest.get()
            await ws.send_json(asdict(state))
    except WebSocketDisconnect:
        logger.info("State websocket disconnected")
    finally:
        await event_bus.unsubscribe("gamepad/state", _on_state)
