# masjid_console/routes/broadcast_routes.py

from concurrent.futures import TimeoutError as FutureTimeoutError

from flask import current_app
from flask_smorest import Blueprint, abort

from ..extensions import limiter, realtime
from ..schemas import AnnounceCommandSchema, BroadcastResultSchema, MessageSchema, ReloadCommandSchema
from ..services.realtime.acknowledgment import ChannelNotConnectedError
from ..services.realtime.summary import summarize_ack
from ..utils.constants import CommandKinds

broadcast_bp = Blueprint(
    'Broadcast',
    __name__,
    url_prefix='/api/broadcast',
    description="Push changes live to the connected display devices."
)


def _broadcast_rate_limit():
    return current_app.config.get('BROADCAST_RATE_LIMIT', "10 per minute")


def _run_broadcast(kind, text, timeout):
    """Broadcasts and shapes the acknowledgment result for the response."""
    wait_seconds = timeout if timeout is not None else current_app.config['ACK_TIMEOUT_SECONDS']
    try:
        result = realtime.broadcast(kind, text, timeout=timeout)
    except ChannelNotConnectedError as e:
        current_app.logger.warning(f"Broadcast '{kind}' rejected: {e.message}")
        abort(503, message="Realtime channel is not connected.")
    except FutureTimeoutError:
        current_app.logger.error(f"Broadcast '{kind}' did not resolve in time.")
        abort(504, message="Broadcast did not complete in time.")

    summary = summarize_ack(result, wait_seconds)
    current_app.logger.info(f"Broadcast '{kind}': {summary['message']}")
    response = result.to_dict()
    response.update(summary)
    response['kind'] = kind
    return response


@broadcast_bp.route('/reload', methods=['POST'])
@limiter.limit(_broadcast_rate_limit)
@broadcast_bp.arguments(ReloadCommandSchema)
@broadcast_bp.response(200, BroadcastResultSchema, description="Acknowledgments collected from the displays.")
@broadcast_bp.alt_response(503, schema=MessageSchema, description="Realtime channel is not connected.")
def reload_displays(args):
    """
    Ask every connected display to reload.

    Resolves as soon as at least one display has acknowledged within the early
    checkpoint, otherwise after the timeout.
    """
    return _run_broadcast(CommandKinds.RELOAD, args['reason'], args.get('timeout'))


@broadcast_bp.route('/announce', methods=['POST'])
@limiter.limit(_broadcast_rate_limit)
@broadcast_bp.arguments(AnnounceCommandSchema)
@broadcast_bp.response(200, BroadcastResultSchema, description="Acknowledgments collected from the displays.")
@broadcast_bp.alt_response(503, schema=MessageSchema, description="Realtime channel is not connected.")
def announce(args):
    """Show an announcement on every connected display."""
    return _run_broadcast(CommandKinds.ANNOUNCE, args['text'], args.get('timeout'))
