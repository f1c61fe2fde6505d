import logging
import os

from flask import Flask, jsonify
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_config
from steamkey.services.community import Community


def _bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'on'}


def _str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip()


def create_app(config_name: str | None = None, community: Community | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # Environment overrides the per-environment defaults.
    app.config.update(
        DEBUG=_bool_env('DEBUG', app.config['DEBUG']),
        TESTING=_bool_env('TESTING', app.config['TESTING']),
        HOST=_str_env('HOST', app.config['HOST']),
        PORT=int(_str_env('PORT', str(app.config['PORT']))),
        LOG_LEVEL=_str_env('LOG_LEVEL', app.config['LOG_LEVEL']),
        STEAM_COMMUNITY_URL=_str_env('STEAM_COMMUNITY_URL', app.config['STEAM_COMMUNITY_URL']),
        STEAM_SESSION_ID=_str_env('STEAM_SESSION_ID', app.config['STEAM_SESSION_ID']),
        STEAM_LOGIN_SECURE=_str_env('STEAM_LOGIN_SECURE', app.config['STEAM_LOGIN_SECURE']),
        STEAM_USER_AGENT=_str_env('STEAM_USER_AGENT', app.config['STEAM_USER_AGENT']),
        CONTROL_API_TOKEN=_str_env('CONTROL_API_TOKEN', app.config['CONTROL_API_TOKEN']),
    )

    app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

    logging.basicConfig(level=app.config['LOG_LEVEL'].upper())

    if not app.config['CONTROL_API_TOKEN']:
        logging.warning('CONTROL_API_TOKEN is not set; key routes are unauthenticated')

    app.extensions['steam_community'] = community or Community.from_config(app.config)

    @app.get('/health')
    def health():
        return jsonify({'status': 'ok'})

    from steamkey.blueprints.keys import keys_bp

    app.register_blueprint(keys_bp)

    return app
