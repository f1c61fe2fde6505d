"""
Configuration module for steamkey
Environment-based defaults for the Flask control API
"""
import os


class Config:
    """Base configuration class"""

    # Steam Community session
    STEAM_COMMUNITY_URL = 'https://steamcommunity.com'
    STEAM_SESSION_ID = ''
    STEAM_LOGIN_SECURE = ''
    STEAM_USER_AGENT = ''

    # Control API
    CONTROL_API_TOKEN = ''
    HOST = '127.0.0.1'
    PORT = 5003

    # Application Settings
    DEBUG = False
    TESTING = False
    LOG_LEVEL = 'INFO'


class DevelopmentConfig(Config):
    """Development environment configuration"""
    DEBUG = True
    LOG_LEVEL = 'DEBUG'


class ProductionConfig(Config):
    """Production environment configuration"""
    DEBUG = False
    HOST = '0.0.0.0'
    LOG_LEVEL = 'WARNING'


class TestingConfig(Config):
    """Testing environment configuration"""
    TESTING = True
    STEAM_COMMUNITY_URL = 'https://steamcommunity.test'
    STEAM_SESSION_ID = 'testsessionid'


# Configuration dictionary
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration object based on environment"""
    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')
    return config.get(config_name, DevelopmentConfig)
