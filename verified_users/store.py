"""DynamoDB access for the users table.

Usage:
    from verified_users.config import load_config
    from verified_users.store import UserStore

    store = UserStore.from_config(load_config())
    user = await store.get_user("123456789012345678")

The store wraps a low-level ``boto3.client("dynamodb")`` rather than a
``Table`` resource: clients are safe to share across threads, which is what
the async methods rely on when they push the blocking call onto a worker.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer

from verified_users.config import DEFAULT_TABLE, UsersConfig
from verified_users.schema import MalformedUserError, User, user_from_item

logger = logging.getLogger(__name__)

_deserializer = TypeDeserializer()


def make_client(config: UsersConfig):
    """Build a DynamoDB client pinned to the configured region."""
    kwargs: Dict[str, Any] = {"region_name": config.region}
    if config.endpoint_url:
        kwargs["endpoint_url"] = config.endpoint_url
    return boto3.client("dynamodb", **kwargs)


def _check_id(discord_id: Any) -> str:
    if not isinstance(discord_id, str) or not discord_id:
        raise ValueError("discord_id must be a non-empty string")
    return discord_id


def _deserialize(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {k: _deserializer.deserialize(v) for k, v in raw.items()}


class UserStore:
    def __init__(self, client: Any, table_name: str = DEFAULT_TABLE) -> None:
        self._client = client
        self._table_name = table_name

    @classmethod
    def from_config(cls, config: UsersConfig) -> "UserStore":
        return cls(make_client(config), table_name=config.table_name)

    @property
    def table_name(self) -> str:
        return self._table_name

    def get_item(self, discord_id: str) -> Optional[Dict[str, Any]]:
        """Fetch the raw item for discord_id, deserialized to Python types.

        Returns None when no item exists. AWS errors propagate unchanged.
        """
        _check_id(discord_id)
        resp = self._client.get_item(
            TableName=self._table_name,
            Key={"discord_id": {"S": discord_id}},
        )
        raw = resp.get("Item")
        if not raw:
            logger.debug("get_item miss table=%s discord_id=%s", self._table_name, discord_id)
            return None
        return _deserialize(raw)

    def find_user(self, discord_id: str) -> Optional[User]:
        item = self.get_item(discord_id)
        if item is None:
            return None
        try:
            return user_from_item(item)
        except MalformedUserError as e:
            logger.warning("Malformed user record in %s: %s", self._table_name, e)
            raise

    def has_user(self, discord_id: str) -> bool:
        _check_id(discord_id)
        resp = self._client.get_item(
            TableName=self._table_name,
            Key={"discord_id": {"S": discord_id}},
            ProjectionExpression="discord_id",
        )
        return bool(resp.get("Item"))

    async def get_user(self, discord_id: str) -> Optional[User]:
        """Look up a user by Discord id.

        Returns None when the record does not exist and raises
        MalformedUserError when it exists but cannot be decoded.
        """
        _check_id(discord_id)
        return await asyncio.to_thread(self.find_user, discord_id)

    async def user_exists(self, discord_id: str) -> bool:
        _check_id(discord_id)
        return await asyncio.to_thread(self.has_user, discord_id)
