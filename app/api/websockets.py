from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect
from sqlalchemy import select

from app.core.auth import user_id_from_token
from app.database import AsyncSessionLocal
from app.models.user import User
from app.services.websocket_service import websocket_manager
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


async def _authenticate(websocket: WebSocket, token: str | None) -> int | None:
    token = token or websocket.cookies.get("access_token")
    user_id = user_id_from_token(token)
    if user_id is None:
        await websocket.close(code=4001, reason="Invalid token")
        return None

    async with AsyncSessionLocal() as db:
        result = await db.execute(
            select(User.id).where(User.id == user_id, User.is_active)
        )
        if result.first() is None:
            await websocket.close(code=4002, reason="User not found or inactive")
            return None

    return user_id


@router.websocket("/ws/feed")
async def websocket_feed(websocket: WebSocket):
    await websocket_manager.connect(websocket, "feed")

    try:
        while True:
            _ = await websocket.receive_text()
    except WebSocketDisconnect:
        websocket_manager.disconnect(websocket)
        logger.info("📡 Feed connection disconnected")


@router.websocket("/ws/exchanges")
async def websocket_exchanges(websocket: WebSocket, token: str | None = Query(None)):
    user_id = await _authenticate(websocket, token)
    if user_id is None:
        return

    await websocket_manager.connect(websocket, "user", user_id=user_id)

    try:
        while True:
            _ = await websocket.receive_text()
    except WebSocketDisconnect:
        websocket_manager.disconnect(websocket)
        logger.info(f"📡 Exchange connection for user {user_id} disconnected")
