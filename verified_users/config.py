from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_TABLE = "users"


class ConfigError(RuntimeError):
    pass


def _region() -> str:
    v = os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION")
    if not v:
        raise ConfigError("Missing required env var: AWS_REGION")
    return v


@dataclass(frozen=True)
class UsersConfig:
    region: str
    table_name: str = DEFAULT_TABLE
    endpoint_url: str | None = None  # local DynamoDB

    def to_dict(self) -> dict[str, str | None]:
        return {
            "region": self.region,
            "table_name": self.table_name,
            "endpoint_url": self.endpoint_url,
        }


def load_config(*, region: str | None = None, table_name: str | None = None) -> UsersConfig:
    """Resolve config from the environment, with optional explicit overrides.

    The result is a snapshot: later changes to the environment do not affect it.
    """
    return UsersConfig(
        region=region or _region(),
        table_name=table_name or os.getenv("USERS_TABLE") or DEFAULT_TABLE,
        endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
    )
