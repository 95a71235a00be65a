"""
Configuration settings for the Finance Forecast service
"""

import os


def _env_float(name: str, default: float) -> float:
    return float(os.environ.get(name, default))


class Config:
    """Base configuration"""
    # App
    APP_NAME = "Finance Forecast"
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')

    # Rate limiting
    RATELIMIT_DEFAULT = os.environ.get('RATELIMIT_DEFAULT', "100 per minute")
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL', 'memory://')

    # Request limits
    MAX_CONTENT_LENGTH = 4 * 1024 * 1024  # 4MB of transactions per request
    MAX_MONTHS_BACK = int(os.environ.get('MAX_MONTHS_BACK', 120))
    MAX_HORIZON = int(os.environ.get('MAX_HORIZON', 36))
    MIN_FORECAST_MONTHS = 3  # Callers reject shorter series

    # Forecast tuning
    FORECAST_ALPHA = _env_float('FORECAST_ALPHA', 0.3)
    FORECAST_BETA = _env_float('FORECAST_BETA', 0.1)
    FORECAST_WINDOW = int(os.environ.get('FORECAST_WINDOW', 3))
    FORECAST_BAND_MULTIPLIER = _env_float('FORECAST_BAND_MULTIPLIER', 1.5)
    FORECAST_Z_SCORE = _env_float('FORECAST_Z_SCORE', 1.96)  # 95%
    FORECAST_TREND_THRESHOLD = _env_float('FORECAST_TREND_THRESHOLD', 0.01)
    FORECAST_SEASONALITY_THRESHOLD = _env_float('FORECAST_SEASONALITY_THRESHOLD', 0.15)
    FORECAST_MIN_SEASONAL_VARIATION = _env_float('FORECAST_MIN_SEASONAL_VARIATION', 0.05)
    # Income and expense totals are never negative
    FORECAST_NON_NEGATIVE = os.environ.get('FORECAST_NON_NEGATIVE', 'True').lower() == 'true'


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    SECRET_KEY = os.environ.get('SECRET_KEY')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    RATELIMIT_ENABLED = False


# Config mapping
config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(env=None):
    """Get config based on environment"""
    env = env or os.environ.get('FLASK_ENV', 'development')
    if env == 'production':
        # Ensure secret key is set in production
        if not ProductionConfig.SECRET_KEY:
            raise ValueError("SECRET_KEY must be set in production")
        return ProductionConfig
    return config.get(env, config['default'])
