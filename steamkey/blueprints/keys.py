from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from steamkey.services.community import Community
from steamkey.services.webapi_key_service import (
    AccessDeniedError,
    CannotRegisterKeyError,
    CannotRevokeKeyError,
    KeyNotFoundError,
    TransportError,
)
from steamkey.utils.security import mask_key, verify_token


keys_bp = Blueprint('keys', __name__, url_prefix='/api/v1/webapi-key')


def _community() -> Community:
    return current_app.extensions['steam_community']


def _bearer_token() -> str | None:
    header = (request.headers.get('Authorization') or '').strip()
    if not header.lower().startswith('bearer '):
        return None
    token = header.split(' ', 1)[1].strip()
    return token or None


def _error(message: str, status_code: int):
    return jsonify({'success': False, 'error': message}), status_code


@keys_bp.before_request
def _require_control_token():
    expected = (current_app.config.get('CONTROL_API_TOKEN') or '').strip()
    if not expected:
        return None
    if not verify_token(_bearer_token(), expected):
        return _error('Authentication required', 401)
    return None


@keys_bp.get('')
def fetch_key():
    try:
        key = _community().fetch_web_api_key()
    except AccessDeniedError as exc:
        return _error(str(exc), 403)
    except KeyNotFoundError as exc:
        return _error(str(exc), 404)
    except TransportError as exc:
        return _error(str(exc), 502)
    return jsonify({'success': True, 'api_key': key})


@keys_bp.post('')
def register_key():
    payload = request.get_json(silent=True) or {}
    domain = str(payload.get('domain') or '').strip()
    if not domain:
        return _error('domain is required', 400)

    try:
        _community().register_web_api_key(domain)
    except (CannotRegisterKeyError, TransportError) as exc:
        return _error(str(exc), 502)
    return jsonify({'success': True, 'domain': domain})


@keys_bp.delete('')
def revoke_key():
    try:
        _community().revoke_web_api_key()
    except (CannotRevokeKeyError, TransportError) as exc:
        return _error(str(exc), 502)
    logging.info('Web API key revoked via control API from %s', request.remote_addr)
    return jsonify({'success': True})


@keys_bp.get('/cached')
def cached_key():
    key = _community().api_key
    return jsonify({'success': True, 'cached': key is not None, 'api_key_hint': mask_key(key) if key else None})
