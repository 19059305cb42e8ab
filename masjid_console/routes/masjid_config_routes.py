# masjid_console/routes/masjid_config_routes.py

from flask import current_app
from flask_smorest import Blueprint, abort

from ..schemas import MasjidConfigSchema, MessageSchema
from ..services import masjid_config_service
from ..services.api_adapters.base_adapter import BackendError

masjid_config_bp = Blueprint(
    'MasjidConfig',
    __name__,
    url_prefix='/api/masjid-config',
    description="Masjid metadata and announcements shown on the displays."
)


@masjid_config_bp.route('', methods=['GET'])
@masjid_config_bp.response(200, MasjidConfigSchema)
@masjid_config_bp.alt_response(404, schema=MessageSchema, description="No masjid configuration saved yet.")
@masjid_config_bp.alt_response(502, schema=MessageSchema)
def get_masjid_config():
    """Get the masjid configuration with announcements as a list."""
    try:
        config = masjid_config_service.load_masjid_config()
    except BackendError as e:
        current_app.logger.error(f"Loading masjid config failed: {e.message}")
        abort(502, message=e.message)

    if config is None:
        abort(404, message="Masjid configuration not found.")
    return config


@masjid_config_bp.route('', methods=['POST'])
@masjid_config_bp.arguments(MasjidConfigSchema)
@masjid_config_bp.response(200, MessageSchema)
@masjid_config_bp.alt_response(502, schema=MessageSchema)
def save_masjid_config(args):
    """Create or replace the masjid configuration."""
    try:
        masjid_config_service.save_masjid_config(args)
    except BackendError as e:
        current_app.logger.error(f"Saving masjid config failed: {e.message}")
        abort(502, message=e.message)
    return {"message": "Masjid configuration saved."}
