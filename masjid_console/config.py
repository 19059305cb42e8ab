import os
from dotenv import load_dotenv

# Load .env file
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)
else:
    print("Warning: .env file not found. Using defaults or environment variables.")

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a_default_fallback_secret_key_for_development_only'
    LOG_LEVEL = "INFO"

    # Sentry Configuration
    SENTRY_DSN = os.environ.get('SENTRY_DSN')

    # Display Backend Configuration
    # The backend is the store of record for iqamaah ranges and the masjid config.
    DISPLAY_BACKEND_ADAPTER = os.environ.get('DISPLAY_BACKEND_ADAPTER') or "DisplayBackendAdapter"
    DISPLAY_BACKEND_BASE_URL = os.environ.get('DISPLAY_BACKEND_BASE_URL') or "http://localhost:5000/api"
    DISPLAY_BACKEND_TIMEOUT_SECONDS = float(os.environ.get('DISPLAY_BACKEND_TIMEOUT_SECONDS', 10))

    # Realtime Channel Configuration
    # Socket.IO endpoint the display devices are connected to.
    REALTIME_SOCKET_URL = os.environ.get('REALTIME_SOCKET_URL')
    REALTIME_AUTOCONNECT = os.environ.get('REALTIME_AUTOCONNECT', 'true').lower() == 'true'
    REALTIME_RECONNECTION_ATTEMPTS = int(os.environ.get('REALTIME_RECONNECTION_ATTEMPTS', 5))
    REALTIME_RECONNECTION_DELAY = int(os.environ.get('REALTIME_RECONNECTION_DELAY', 1))

    # Acknowledgment Configuration
    # A broadcast resolves early if any display has answered by ACK_EARLY_EXIT_SECONDS,
    # otherwise it waits the full ACK_TIMEOUT_SECONDS.
    ACK_TIMEOUT_SECONDS = float(os.environ.get('ACK_TIMEOUT_SECONDS', 15))
    ACK_EARLY_EXIT_SECONDS = float(os.environ.get('ACK_EARLY_EXIT_SECONDS', 2))
    BROADCAST_RATE_LIMIT = os.environ.get('BROADCAST_RATE_LIMIT', "10 per minute")

class DevelopmentConfig(Config):
    FLASK_ENV = 'development'
    DEBUG = True
    LOG_LEVEL = "DEBUG"

class ProductionConfig(Config):
    FLASK_ENV = 'production'
    DEBUG = False

class TestingConfig(Config):
    TESTING = True
    RATELIMIT_ENABLED = False # Disable rate limiting for tests
    SECRET_KEY = 'test-secret-key'
    DISPLAY_BACKEND_BASE_URL = "http://backend.test/api"
    REALTIME_SOCKET_URL = None
    REALTIME_AUTOCONNECT = False
    ACK_TIMEOUT_SECONDS = 0.3
    ACK_EARLY_EXIT_SECONDS = 0.05

config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
