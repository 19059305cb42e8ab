import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration

# Import extensions from the central extensions file
from .extensions import limiter, realtime
import logging
from flask import Flask
from flask_cors import CORS
from flask_smorest import Api

# Declare extensions that are not in the extensions file
cors = CORS()
api = Api() # Initialize Flask-Smorest API

def create_app(config_name):
    """
    Flask Application Factory function.
    """
    app = Flask(__name__,
                instance_relative_config=False)

    # 1. Load Config
    from .config import config_by_name
    config_obj = config_by_name.get(config_name, config_by_name['default'])
    app.config.from_object(config_obj)

    # 2. Set up Logging
    log_level_str = app.config.get('LOG_LEVEL', 'INFO').upper()
    log_level = getattr(logging, log_level_str, logging.INFO)
    app.logger.setLevel(log_level)
    app.logger.info(f"App configured with: {config_obj.__name__}")

    # Flask-Smorest API documentation configuration
    app.config["API_TITLE"] = "Masjid Console API"
    app.config["API_VERSION"] = "v1"
    app.config["OPENAPI_VERSION"] = "3.0.2"
    app.config["OPENAPI_URL_PREFIX"] = "/api/docs"
    app.config["OPENAPI_SWAGGER_UI_PATH"] = "/swagger-ui"
    app.config["OPENAPI_SWAGGER_UI_URL"] = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    app.logger.info(f"Display backend: {app.config.get('DISPLAY_BACKEND_BASE_URL')}")

    # 3. Sentry SDK initialization - for error and performance tracking
    if app.config.get('SENTRY_DSN'):
        sentry_sdk.init(
            dsn=app.config['SENTRY_DSN'],
            integrations=[FlaskIntegration()],
            send_default_pii=True,
            traces_sample_rate=1.0
        )
        app.logger.info("Sentry initialized for error tracking.")

    # 4. Initialize Extensions
    cors.init_app(app, resources={r"/api/*": {"origins": "*"}})
    limiter.init_app(app)
    realtime.init_app(app)

    # 5. Initialize Flask-Smorest API
    api.init_app(app)

    # 6. Register Blueprints in app context
    with app.app_context():
        from .routes.main_routes import main_bp
        from .routes.iqamaah_routes import iqamaah_bp
        from .routes.broadcast_routes import broadcast_bp
        from .routes.masjid_config_routes import masjid_config_bp

        api.register_blueprint(main_bp)
        api.register_blueprint(iqamaah_bp)
        api.register_blueprint(broadcast_bp)
        api.register_blueprint(masjid_config_bp)

        app.logger.info(f"Application initialized with environment: {app.config.get('FLASK_ENV')}, Debug: {app.config.get('DEBUG')}")

    # 7. Finally, return the app
    return app
