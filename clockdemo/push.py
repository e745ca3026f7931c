"""
Per-connection push loop for the clock WebSocket.

One TimePusher owns one accepted WebSocket. It sends the current time as a
JSON string right away and then once per interval. It stops when a write
fails or the peer disconnects, and then it closes the socket.
"""

import enum
import logging

import anyio
from starlette.websockets import WebSocketDisconnect

logger = logging.getLogger(__name__)

WRITE_ERRORS = (WebSocketDisconnect, RuntimeError, OSError)


class PushState(enum.Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class TimePusher:
    def __init__(self, websocket, formatter, interval):
        self.websocket = websocket
        self.formatter = formatter
        self.interval = interval
        self.state = None
        self.messages_sent = 0
        self.write_failed = False

    @property
    def peer(self):
        client = getattr(self.websocket, "client", None)
        if client is None:
            return "unknown peer"
        return f"{client.host}:{client.port}"

    async def run(self):
        self.state = PushState.RUNNING
        try:
            async with anyio.create_task_group() as tg:

                async def until_done(loop_fn):
                    await loop_fn()
                    tg.cancel_scope.cancel()

                tg.start_soon(until_done, self._send_loop)
                tg.start_soon(until_done, self._watch_disconnect)
        finally:
            self.state = PushState.TERMINATED
        if self.write_failed:
            await self._close()
        logger.info("push loop for %s terminated after %d messages", self.peer, self.messages_sent)

    async def _send_loop(self):
        deadline = anyio.current_time()
        while True:
            try:
                await self.websocket.send_json(self.formatter.now())
            except WRITE_ERRORS as e:
                logger.error("write to %s failed: %s", self.peer, e)
                self.write_failed = True
                return
            self.messages_sent += 1
            deadline += self.interval
            now = anyio.current_time()
            if deadline < now:
                # Missed ticks are dropped; the schedule restarts from this write.
                deadline = now + self.interval
            await anyio.sleep(deadline - now)

    async def _watch_disconnect(self):
        # Client messages carry no meaning; reading them is how a close is noticed.
        while True:
            message = await self.websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.debug("%s disconnected (code %s)", self.peer, message.get("code"))
                return

    async def _close(self):
        try:
            await self.websocket.close()
        except WRITE_ERRORS as e:
            logger.debug("close for %s failed: %s", self.peer, e)
