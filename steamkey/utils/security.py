from __future__ import annotations

import hmac
import secrets


def generate_session_id(num_bytes: int = 12) -> str:
    return secrets.token_hex(num_bytes)


def mask_key(key: str | None, visible: int = 4) -> str:
    if not key:
        return '<none>'
    if len(key) <= visible:
        return '...' + key
    return '...' + key[-visible:]


def verify_token(token: str | None, expected: str) -> bool:
    if not token:
        return False
    return hmac.compare_digest(token.encode('utf-8'), expected.encode('utf-8'))
