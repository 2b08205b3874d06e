"""
Pytest fixtures for nosscan tests. RPC traffic goes through httpx.MockTransport.
"""

from __future__ import annotations

import io
import json
from datetime import datetime, timezone

import httpx
import pytest
from rich.console import Console

from nosscan.config import Settings
from nosscan.models import AccountDescriptor
from nosscan.rpc import SolanaRpcClient

ADDRESS = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
ADDRESS_2 = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"
NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def token_accounts_result(*entries):
    """Build a getTokenAccountsByOwner result from (pubkey, amount, decimals) tuples."""
    return {
        "context": {"slot": 1},
        "value": [
            {
                "pubkey": pubkey,
                "account": {"data": {"parsed": {"info": {
                    "tokenAmount": {"amount": amount, "decimals": decimals},
                }}}},
            }
            for pubkey, amount, decimals in entries
        ],
    }


def signature(block_time, sig="5sig"):
    return {
        "signature": sig,
        "slot": 1,
        "err": None,
        "memo": None,
        "blockTime": block_time,
        "confirmationStatus": "finalized",
    }


class FakeNode:
    """
    Answers JSON-RPC requests from per-(method, address) canned results.

    A value may be an Exception instance (raised as a transport error) or an
    httpx.Response (returned as-is).
    """

    def __init__(self):
        self.results = {}
        self.requests = []

    def set(self, method, address, value):
        self.results[(method, address)] = value

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        key = (body["method"], body["params"][0])
        if key not in self.results:
            return httpx.Response(200, json={
                "jsonrpc": "2.0", "id": body["id"],
                "error": {"code": -32602, "message": "no canned result"},
            })
        value = self.results[key]
        if isinstance(value, Exception):
            raise value
        if isinstance(value, httpx.Response):
            return value
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": value})

    def methods(self):
        return [r["method"] for r in self.requests]


@pytest.fixture
def node():
    return FakeNode()


@pytest.fixture
def client(node):
    c = SolanaRpcClient("http://rpc.test", transport=httpx.MockTransport(node.handler))
    yield c
    c.close()


@pytest.fixture
def account():
    return AccountDescriptor(address=ADDRESS, target_token_account="T1", display_name="node-01")


@pytest.fixture
def settings():
    return Settings(pacing_seconds=5.0)


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200, color_system=None, force_terminal=False)


def output(console: Console) -> str:
    return console.file.getvalue()
