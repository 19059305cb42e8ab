# masjid_console/routes/main_routes.py

from flask_smorest import Blueprint
from prometheus_client import generate_latest

from ..extensions import realtime
from ..schemas import MessageSchema

main_bp = Blueprint('Main', __name__, url_prefix='/')

@main_bp.route('/')
@main_bp.response(200, MessageSchema)
def index():
    """
    Main endpoint for the API.
    """
    status = "connected" if realtime.connected else "disconnected"
    return {"message": f"Masjid console API is running. Realtime channel {status}."}

@main_bp.route('/api/metrics')
def metrics():
    return generate_latest(), 200, {'Content-Type': 'text/plain; version=0.0.4; charset=utf-8'}
