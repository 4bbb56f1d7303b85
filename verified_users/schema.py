from __future__ import annotations

import base64
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, FrozenSet, Mapping, Union

from boto3.dynamodb.types import Binary

CLAIM_KINDS = ("major", "school", "affiliation")

Timestamp = Union[int, float]


class UserRecordError(Exception):
    pass


class MalformedUserError(UserRecordError, ValueError):
    """An item exists in the users table but does not have the User shape."""

    def __init__(self, discord_id: Any, field_name: str, reason: str) -> None:
        self.discord_id = discord_id
        self.field_name = field_name
        self.reason = reason
        super().__init__(f"malformed user record {discord_id!r}: {field_name} {reason}")


@dataclass(frozen=True)
class Claims:
    major: FrozenSet[str] = field(default_factory=frozenset)
    school: FrozenSet[str] = field(default_factory=frozenset)
    affiliation: FrozenSet[str] = field(default_factory=frozenset)

    def to_dict(self) -> Dict[str, list[str]]:
        return {kind: sorted(getattr(self, kind)) for kind in CLAIM_KINDS}


@dataclass(frozen=True)
class User:
    discord_id: str
    token_requested_at: Timestamp
    encrypted_eid: bytes
    claims: Claims = field(default_factory=Claims)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe rendering. The encrypted EID stays opaque (base64 only)."""
        return {
            "discord_id": self.discord_id,
            "token_requested_at": self.token_requested_at,
            "encrypted_eid": base64.b64encode(self.encrypted_eid).decode("ascii"),
            "claims": self.claims.to_dict(),
        }


def _timestamp(discord_id: str, value: Any) -> Timestamp:
    # bool is an int subclass; never a valid timestamp.
    if isinstance(value, bool) or not isinstance(value, (Decimal, int, float)):
        raise MalformedUserError(discord_id, "token_requested_at", "is not a number")
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise MalformedUserError(discord_id, "token_requested_at", "is not finite")
        return int(value) if value == value.to_integral_value() else float(value)
    return value


def _blob(discord_id: str, value: Any) -> bytes:
    if isinstance(value, Binary):
        return bytes(value.value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise MalformedUserError(discord_id, "encrypted_eid", "is not binary")


def _string_set(discord_id: str, kind: str, value: Any) -> FrozenSet[str]:
    # DynamoDB cannot store an empty set, so a missing category means "none".
    if value is None:
        return frozenset()
    if isinstance(value, (set, frozenset, list, tuple)) and all(isinstance(v, str) for v in value):
        return frozenset(value)
    raise MalformedUserError(discord_id, f"claims.{kind}", "is not a set of strings")


def claims_from_obj(discord_id: str, obj: Any) -> Claims:
    if obj is None:
        return Claims()
    if not isinstance(obj, Mapping):
        raise MalformedUserError(discord_id, "claims", "is not a map")
    return Claims(**{kind: _string_set(discord_id, kind, obj.get(kind)) for kind in CLAIM_KINDS})


def user_from_item(item: Mapping[str, Any]) -> User:
    """Decode a deserialized DynamoDB item into a User.

    Raises MalformedUserError on the first field that does not match.
    """
    discord_id = item.get("discord_id")
    if not isinstance(discord_id, str) or not discord_id:
        raise MalformedUserError(discord_id, "discord_id", "is missing or not a string")
    for name in ("token_requested_at", "encrypted_eid"):
        if item.get(name) is None:
            raise MalformedUserError(discord_id, name, "is missing")

    return User(
        discord_id=discord_id,
        token_requested_at=_timestamp(discord_id, item["token_requested_at"]),
        encrypted_eid=_blob(discord_id, item["encrypted_eid"]),
        claims=claims_from_obj(discord_id, item.get("claims")),
    )
