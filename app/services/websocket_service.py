from fastapi import WebSocket
import json
import logging
import time
import asyncio
from collections import defaultdict

logger = logging.getLogger(__name__)

STALE_CONNECTION_SECONDS = 86400


class WebSocketManager:
    def __init__(self):
        self.feed_connections: set[WebSocket] = set()
        self.user_connections: dict[int, set[WebSocket]] = defaultdict(set)

        self.connection_metadata: dict[WebSocket, dict[str, object]] = {}

        self._cleanup_task: asyncio.Task[None] | None = None
        self._send_tasks: set[asyncio.Task[None]] = set()

    def _start_cleanup_task(self):
        # Started from the first connect so the manager can be built outside a running loop.
        if not self._cleanup_task or self._cleanup_task.done():
            self._cleanup_task = asyncio.create_task(self._periodic_cleanup())

    async def connect(
        self,
        websocket: WebSocket,
        connection_type: str,
        user_id: int | None = None,
    ):
        if connection_type not in ("feed", "user"):
            raise ValueError(f"Unknown connection type: {connection_type}")
        if connection_type == "user" and user_id is None:
            raise ValueError("user_id required for user connection")

        await websocket.accept()
        self._start_cleanup_task()

        self.connection_metadata[websocket] = {
            'type': connection_type,
            'user_id': user_id,
            'connected_at': time.time()
        }

        if connection_type == "feed":
            self.feed_connections.add(websocket)
            logger.info(f"📡 Feed connection added (total: {len(self.feed_connections)})")
        elif user_id is not None:
            self.user_connections[user_id].add(websocket)
            logger.info(f"📡 Exchange connection added for user {user_id}")

    def disconnect(self, websocket: WebSocket):
        _ = self.connection_metadata.pop(websocket, None)

        self.feed_connections.discard(websocket)

        empty_users = []
        for user_id, connection_set in self.user_connections.items():
            connection_set.discard(websocket)
            if not connection_set:
                empty_users.append(user_id)

        for user_id in empty_users:
            del self.user_connections[user_id]

    async def _periodic_cleanup(self):
        while True:
            try:
                await asyncio.sleep(60)
                current_time = time.time()

                stale_connections = [
                    websocket
                    for websocket, metadata in self.connection_metadata.items()
                    if current_time - float(metadata.get('connected_at', 0)) > STALE_CONNECTION_SECONDS  # type: ignore[arg-type]
                ]

                for websocket in stale_connections:
                    self.disconnect(websocket)

                if stale_connections:
                    logger.info(f"Dropped {len(stale_connections)} stale WebSocket connections")

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Cleanup task error: {e}")
                await asyncio.sleep(300)

    async def shutdown(self):
        if self._cleanup_task and not self._cleanup_task.done():
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
        self._cleanup_task = None

        for task in list(self._send_tasks):
            task.cancel()
        await self.drain()

    def is_user_connected(self, user_id: int) -> bool:
        return user_id in self.user_connections and len(self.user_connections[user_id]) > 0

    async def _send_one(self, websocket: WebSocket, message_str: str, target: str):
        try:
            await websocket.send_text(message_str)
        except Exception as e:
            logger.warning(f"Failed to send {target} message: {e}")
            self.disconnect(websocket)

    def _send_all(self, connections: set[WebSocket], message_str: str, target: str):
        """Schedule one send per socket and return without waiting on any of them."""
        for websocket in connections.copy():
            task = asyncio.create_task(self._send_one(websocket, message_str, target))
            self._send_tasks.add(task)
            task.add_done_callback(self._send_tasks.discard)

    async def drain(self):
        """Wait for every scheduled send to finish."""
        pending = [task for task in self._send_tasks if not task.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [task for task in self._send_tasks if not task.done()]

    def send_to_user(self, user_id: int, message: dict[str, object]):
        if user_id not in self.user_connections:
            logger.debug(f"No connections found for user {user_id}")
            return

        self._send_all(
            self.user_connections[user_id], json.dumps(message), f"user {user_id}"
        )

    def broadcast_feed(self, message: dict[str, object]):
        if not self.feed_connections:
            return

        self._send_all(self.feed_connections, json.dumps(message), "feed")

    def notify_exchange(
        self, event_type: str, exchange_id: int, status: str, participant_ids: tuple[int, ...]
    ):
        message: dict[str, object] = {
            'type': event_type,
            'exchange_id': exchange_id,
            'status': status,
            'timestamp': time.time()
        }
        for user_id in participant_ids:
            self.send_to_user(user_id, message)

    def get_connection_stats(self) -> dict[str, object]:
        return {
            'feed_connections': len(self.feed_connections),
            'user_connections': {k: len(v) for k, v in self.user_connections.items()},
            'total_connections': len(self.connection_metadata),
        }


websocket_manager = WebSocketManager()
