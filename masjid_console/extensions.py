# masjid_console/extensions.py

from concurrent.futures import TimeoutError as FutureTimeoutError

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from socketio import exceptions as socketio_exceptions

from .services.realtime.acknowledgment import AcknowledgmentProtocol
from .services.realtime.channel import LoopRunner, SocketChannel


class FlaskRealtime:
    """
    A wrapper class to provide a Flask-like interface for the realtime channel.
    The channel lives on a background event loop; views call the blocking helpers.
    """
    def __init__(self, app=None):
        self.channel = None
        self.protocol = None
        self.runner = LoopRunner()
        self.logger = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        """Initialize the channel and the acknowledgment protocol from the app configuration."""
        self.logger = app.logger
        self.channel = SocketChannel(
            app.config.get('REALTIME_SOCKET_URL'),
            reconnection_attempts=app.config.get('REALTIME_RECONNECTION_ATTEMPTS', 5),
            reconnection_delay=app.config.get('REALTIME_RECONNECTION_DELAY', 1),
        )
        self.protocol = AcknowledgmentProtocol(
            self.channel,
            timeout=app.config.get('ACK_TIMEOUT_SECONDS', 15),
            early_exit=app.config.get('ACK_EARLY_EXIT_SECONDS', 2),
        )
        app.extensions['realtime'] = self

        if app.config.get('REALTIME_AUTOCONNECT') and app.config.get('REALTIME_SOCKET_URL'):
            self.connect()

    @property
    def connected(self):
        return bool(self.channel and self.channel.connected)

    def connect(self):
        """Connects the channel; a failure is logged and leaves the channel disconnected."""
        if self.connected:
            return True
        try:
            self.runner.run(self.channel.connect(), timeout=30)
            return True
        except (socketio_exceptions.ConnectionError, ValueError) as e:
            self.logger.error(f"Realtime channel could not connect: {e}")
            return False
        except FutureTimeoutError:
            self.logger.error("Realtime channel could not connect: handshake timed out.")
            return False

    def broadcast(self, kind, text, timeout=None):
        """
        Blocking broadcast for use from views. Fails at once with ChannelNotConnectedError
        if the channel is down; the socket client reconnects on its own.
        """
        wait = (timeout if timeout is not None else self.protocol.timeout) + 5
        return self.runner.run(self.protocol.broadcast(kind, text, timeout=timeout), timeout=wait)

    def shutdown(self):
        if self.connected:
            self.runner.run(self.channel.disconnect(), timeout=10)
        self.runner.stop()


# Limiter extension (rate limiting)
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"]
)

# Realtime channel extension
realtime = FlaskRealtime()
