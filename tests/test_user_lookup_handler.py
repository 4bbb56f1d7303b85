from __future__ import annotations

import importlib.util
import json
import os
import sys
import unittest
from pathlib import Path
from unittest import mock


class _FakeDynamoClient:
    def __init__(self, items: dict[str, dict]) -> None:
        self.items = items

    def get_item(self, **kwargs):
        raw = self.items.get(kwargs["Key"]["discord_id"]["S"])
        return {"Item": raw} if raw else {}


_ITEMS = {
    "123": {
        "discord_id": {"S": "123"},
        "token_requested_at": {"N": "1650000000"},
        "encrypted_eid": {"B": b"eid"},
        "claims": {"M": {"school": {"SS": ["Engineering"]}}},
    },
    "bad": {"discord_id": {"S": "bad"}},
}


def _load_handler_module(env: dict[str, str]):
    """Load functions/user_lookup/handler.py as a module without requiring it be a package."""
    repo_root = Path(__file__).resolve().parents[1]
    handler_py = repo_root / "functions" / "user_lookup" / "handler.py"
    spec = importlib.util.spec_from_file_location("user_lookup_handler_for_tests", handler_py)
    assert spec and spec.loader
    mod = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = mod
    with mock.patch.dict(os.environ, env, clear=True), mock.patch(
        "boto3.client", return_value=_FakeDynamoClient(_ITEMS)
    ):
        spec.loader.exec_module(mod)
    return mod


class TestUserLookupHandler(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.mod = _load_handler_module({"AWS_REGION": "us-west-2"})

    def test_found(self) -> None:
        resp = self.mod.handler({"pathParameters": {"discord_id": "123"}}, None)
        self.assertEqual(resp["statusCode"], 200)
        body = json.loads(resp["body"])
        self.assertEqual(body["user"]["discord_id"], "123")
        self.assertEqual(body["user"]["claims"]["school"], ["Engineering"])
        self.assertEqual(body["user"]["claims"]["major"], [])

    def test_query_string_id(self) -> None:
        resp = self.mod.handler({"queryStringParameters": {"discord_id": "123"}}, None)
        self.assertEqual(resp["statusCode"], 200)

    def test_not_found(self) -> None:
        resp = self.mod.handler({"pathParameters": {"discord_id": "999"}}, None)
        self.assertEqual(resp["statusCode"], 404)

    def test_missing_id(self) -> None:
        resp = self.mod.handler({"pathParameters": None}, None)
        self.assertEqual(resp["statusCode"], 400)

    def test_malformed_record(self) -> None:
        resp = self.mod.handler({"pathParameters": {"discord_id": "bad"}}, None)
        self.assertEqual(resp["statusCode"], 500)
        self.assertEqual(json.loads(resp["body"])["error"], "malformed_user_record")


class TestUserLookupHandlerUnconfigured(unittest.TestCase):
    def test_missing_region_returns_500(self) -> None:
        mod = _load_handler_module({})
        resp = mod.handler({"pathParameters": {"discord_id": "123"}}, None)
        self.assertEqual(resp["statusCode"], 500)
        self.assertIn("AWS_REGION", json.loads(resp["body"])["error"])
