# masjid_console/services/realtime/acknowledgment.py
"""
Command broadcast with bounded, quorum-aware acknowledgment.

A command ("reload" or "announce") is emitted to every connected display and the
client:ack events that come back are collected. Two timers race:

- the early-exit checkpoint (a couple of seconds): if any display has answered
  by then, the session resolves at once with timed_out=False;
- the deadline: otherwise the session waits for the full timeout and resolves
  with timed_out=True, success meaning "at least one display answered".

Stragglers answering after the checkpoint are not counted. A timeout is a
result, not an error, and a broadcast is never retried because displays that
already showed an announcement would show it twice.
"""
import asyncio
import datetime
import logging
from typing import Any, Dict, List, Optional

from ...metrics import BROADCASTS_TOTAL, BROADCAST_ACKS_TOTAL, BROADCAST_DURATION_SECONDS
from ...utils.constants import ACK_EVENT, BROADCAST_EVENT, CommandKinds

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 15.0
DEFAULT_EARLY_EXIT_SECONDS = 2.0


class ChannelNotConnectedError(RuntimeError):
    """Raised when a broadcast is attempted while the realtime channel is down."""

    def __init__(self, message="Socket not connected"):
        super().__init__(message)
        self.message = message


class AckResult:
    def __init__(self, success: bool, timed_out: bool, responses: List[Any]):
        self.success = success
        self.timed_out = timed_out
        self.responses = responses

    @property
    def response_count(self) -> int:
        return len(self.responses)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'timedOut': self.timed_out,
            'responses': list(self.responses),
            'count': self.response_count,
        }

    def __repr__(self):
        return f"AckResult(success={self.success}, timed_out={self.timed_out}, responses={self.response_count})"


class AckSession:
    """
    One outstanding broadcast. Responses are only appended until the session
    resolves; anything arriving afterwards is dropped.
    """

    def __init__(self, kind: str, timeout: float, early_exit: float, now: float):
        self.kind = kind
        self.responses: List[Any] = []
        self.started_at = now
        self.deadline = now + timeout
        self.early_exit_at = now + min(early_exit, timeout)
        self.result: Optional[AckResult] = None
        self._cancelled = asyncio.Event()

    @property
    def resolved(self) -> bool:
        return self.result is not None

    def add_response(self, data: Any) -> None:
        if self.resolved:
            return
        self.responses.append(data)
        BROADCAST_ACKS_TOTAL.labels(kind=self.kind).inc()

    def cancel(self) -> None:
        """Stops waiting; the session resolves with the responses gathered so far."""
        self._cancelled.set()

    def resolve(self, timed_out: bool) -> AckResult:
        if self.result is None:
            success = bool(self.responses) if timed_out else True
            self.result = AckResult(success=success, timed_out=timed_out, responses=list(self.responses))
        return self.result


def build_command_payload(kind: str, text: str) -> Dict[str, Any]:
    text_key = 'reason' if kind == CommandKinds.RELOAD else 'text'
    return {
        'kind': kind,
        text_key: text,
        'timestamp': datetime.datetime.now(datetime.timezone.utc).isoformat(),
    }


class AcknowledgmentProtocol:
    """
    Broadcasts commands over a SocketChannel-like object (needs `connected`,
    `emit`, `on` and `off`) and waits for acknowledgments.
    """

    def __init__(self, channel, timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 early_exit: float = DEFAULT_EARLY_EXIT_SECONDS):
        self.channel = channel
        self.timeout = timeout
        self.early_exit = early_exit

    async def broadcast(self, kind: str, text: str, timeout: Optional[float] = None,
                        session_holder: Optional[list] = None) -> AckResult:
        """
        Emits the command and resolves once the early checkpoint or the deadline decides.

        Args:
            kind (str): 'reload' or 'announce'.
            text (str): Reload reason or announcement text.
            timeout (float, optional): Seconds to wait at most. Defaults to the protocol timeout.
            session_holder (list, optional): If given, the live AckSession is appended to it
                                             so the caller can cancel it.

        Raises:
            ChannelNotConnectedError: The channel is down; nothing was emitted.
            ValueError: Unknown command kind.
        """
        if kind not in CommandKinds.ALL:
            raise ValueError(f"Unknown command kind '{kind}'")
        if not self.channel.connected:
            BROADCASTS_TOTAL.labels(kind=kind, outcome='not_connected').inc()
            raise ChannelNotConnectedError()

        timeout = self.timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        session = AckSession(kind, timeout, self.early_exit, loop.time())
        if session_holder is not None:
            session_holder.append(session)

        # Listener goes on before the emit.
        self.channel.on(ACK_EVENT, session.add_response)
        try:
            await self.channel.emit(BROADCAST_EVENT, build_command_payload(kind, text))
            logger.info(f"Broadcast '{kind}' sent, waiting up to {timeout}s for acknowledgments.")
            result = await self._wait(session, loop)
        finally:
            self.channel.off(ACK_EVENT, session.add_response)

        outcome = 'early' if not result.timed_out else ('partial' if result.success else 'silent')
        BROADCASTS_TOTAL.labels(kind=kind, outcome=outcome).inc()
        BROADCAST_DURATION_SECONDS.labels(kind=kind).observe(loop.time() - session.started_at)
        logger.info(f"Broadcast '{kind}' resolved: {result}")
        return result

    async def _wait(self, session: AckSession, loop) -> AckResult:
        early_timer = loop.create_task(asyncio.sleep(max(0.0, session.early_exit_at - loop.time())))
        deadline_timer = loop.create_task(asyncio.sleep(max(0.0, session.deadline - loop.time())))
        cancel_waiter = loop.create_task(session._cancelled.wait())
        pending = {early_timer, deadline_timer, cancel_waiter}

        try:
            while True:
                done, pending = await asyncio.wait(pending, return_when=asyncio.FIRST_COMPLETED)
                if deadline_timer in done or cancel_waiter in done:
                    return session.resolve(timed_out=True)
                if early_timer in done and session.responses:
                    return session.resolve(timed_out=False)
        finally:
            # The losing timers must not fire into a resolved session.
            for task in pending:
                task.cancel()
