from __future__ import annotations

import json
import logging

from verified_users.config import ConfigError, load_config
from verified_users.logging_utils import configure_logging
from verified_users.schema import MalformedUserError
from verified_users.store import UserStore

configure_logging()
logger = logging.getLogger(__name__)

# Built once per container; region is fixed for the life of the process.
try:
    _store: UserStore | None = UserStore.from_config(load_config())
    _config_error: str | None = None
except ConfigError as e:
    _store = None
    _config_error = str(e)


def _json(status: int, body: dict) -> dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }


def _discord_id(event: dict) -> str | None:
    for key in ("pathParameters", "queryStringParameters"):
        params = event.get(key) or {}
        v = params.get("discord_id")
        if v:
            return str(v)
    return None


def handler(event, context):
    if _store is None:
        return _json(500, {"error": _config_error or "users store not configured"})
    discord_id = _discord_id(event or {})
    if not discord_id:
        return _json(400, {"error": "Missing discord_id"})

    try:
        user = _store.find_user(discord_id)
    except MalformedUserError as e:
        return _json(500, {"error": "malformed_user_record", "field": e.field_name})
    if user is None:
        return _json(404, {"error": "not_found"})

    logger.debug("user_lookup hit discord_id=%s", discord_id)
    return _json(200, {"user": user.to_dict()})
