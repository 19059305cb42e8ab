# masjid_console/services/realtime/channel.py
"""
Persistent Socket.IO channel to the display devices, plus the background event
loop that lets synchronous Flask views drive it.
"""
import asyncio
import concurrent.futures
import logging
import threading
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

import socketio

logger = logging.getLogger(__name__)


class SocketChannel:
    """
    Thin wrapper around socketio.AsyncClient.

    Listeners are kept in a local registry so they can be detached again; the
    Socket.IO client only ever sees one dispatcher per event.
    """

    def __init__(self, url: Optional[str], client: Optional[socketio.AsyncClient] = None,
                 reconnection_attempts: int = 5, reconnection_delay: int = 1):
        self.url = url
        self.sio = client or socketio.AsyncClient(
            reconnection=True,
            reconnection_attempts=reconnection_attempts,
            reconnection_delay=reconnection_delay,
        )
        self._listeners: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)
        self._bound_events = set()

        self.sio.on('connect', self._on_connect)
        self.sio.on('disconnect', self._on_disconnect)
        self.sio.on('connect_error', self._on_connect_error)

    @property
    def connected(self) -> bool:
        return bool(self.sio.connected)

    async def connect(self) -> None:
        if self.connected:
            return
        if not self.url:
            raise ValueError("REALTIME_SOCKET_URL is not configured.")
        logger.info(f"Connecting realtime channel to {self.url}")
        await self.sio.connect(self.url, transports=['websocket', 'polling'])

    async def disconnect(self) -> None:
        if self.connected:
            await self.sio.disconnect()

    async def emit(self, event: str, data: Dict[str, Any]) -> None:
        logger.debug(f"Emitting '{event}': {data}")
        await self.sio.emit(event, data)

    def on(self, event: str, listener: Callable[[Any], None]) -> None:
        if event not in self._bound_events:
            self.sio.on(event, self._dispatcher(event))
            self._bound_events.add(event)
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Callable[[Any], None]) -> None:
        try:
            self._listeners[event].remove(listener)
        except ValueError:
            pass

    def listener_count(self, event: str) -> int:
        return len(self._listeners[event])

    def _dispatcher(self, event: str):
        async def dispatch(data=None, *args):
            for listener in list(self._listeners[event]):
                listener(data)
        return dispatch

    async def _on_connect(self):
        logger.info(f"Realtime channel connected: {self.sio.sid}")

    async def _on_disconnect(self, *args):
        logger.info("Realtime channel disconnected")

    async def _on_connect_error(self, error=None):
        logger.error(f"Realtime channel connection error: {error}")


class LoopRunner:
    """Runs an asyncio event loop in a daemon thread and submits coroutines to it."""

    def __init__(self):
        self.loop = None
        self.thread = None
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            if self.loop is not None:
                return
            self.loop = asyncio.new_event_loop()

            def run_loop():
                asyncio.set_event_loop(self.loop)
                self.loop.run_forever()

            self.thread = threading.Thread(target=run_loop, name="realtime-loop", daemon=True)
            self.thread.start()

    def run(self, coro, timeout: Optional[float] = None):
        """Blocks until the coroutine finishes on the background loop and returns its result."""
        self.start()
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        try:
            return future.result(timeout)
        except concurrent.futures.TimeoutError:
            # The coroutine is cancelled on the loop too.
            future.cancel()
            raise

    def stop(self) -> None:
        with self._lock:
            if self.loop is None:
                return
            self.loop.call_soon_threadsafe(self.loop.stop)
            self.thread.join(timeout=5)
            self.loop.close()
            self.loop = None
            self.thread = None
