"""
nosscan/rpc.py
Thin Solana JSON-RPC adapter over httpx.

One POST per call, no retries. Anything that is not a well-formed result
(transport error, HTTP status, JSON-RPC error member, unexpected shape)
is raised as RpcError.
"""

import itertools
import logging
from typing import Any, List, Optional

import httpx

from nosscan.config import REQUEST_TIMEOUT, RPC_URL
from nosscan.models import SignatureRecord, TokenAccountEntry

LOG = logging.getLogger("nosscan.rpc")


class RpcError(Exception):
    """A JSON-RPC call failed or returned something we cannot decode."""

    def __init__(self, method: str, message: str):
        super().__init__(f"{method}: {message}")
        self.method = method


class SolanaRpcClient:
    def __init__(self, url: str = RPC_URL, timeout: float = REQUEST_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self._ids = itertools.count(1)
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        LOG.debug("SolanaRpcClient created (url=%s timeout=%s)", url, timeout)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self._http.close()

    def call(self, method: str, params: list) -> Any:
        """Send one request and return its `result` member."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params,
        }
        try:
            r = self._http.post(self.url, json=payload)
            r.raise_for_status()
            body = r.json()
        except httpx.HTTPError as exc:
            raise RpcError(method, str(exc)) from exc
        except ValueError as exc:
            raise RpcError(method, f"invalid JSON body: {exc}") from exc

        if not isinstance(body, dict):
            raise RpcError(method, "response is not a JSON object")
        if body.get("error") is not None:
            err = body["error"]
            if isinstance(err, dict):
                raise RpcError(method, f"error {err.get('code')}: {err.get('message')}")
            raise RpcError(method, f"error {err}")
        if "result" not in body:
            raise RpcError(method, "response has no result")
        return body["result"]

    def get_token_accounts_by_owner(self, owner: str, program_id: str) -> List[TokenAccountEntry]:
        method = "getTokenAccountsByOwner"
        result = self.call(method, [
            owner,
            {"programId": program_id},
            {"encoding": "jsonParsed"},
        ])
        entries = []
        try:
            for value in result["value"]:
                amount = value["account"]["data"]["parsed"]["info"]["tokenAmount"]
                decimals = int(amount["decimals"])
                if decimals < 0:
                    raise ValueError(f"negative decimals {decimals}")
                entries.append(TokenAccountEntry(
                    pubkey=str(value["pubkey"]),
                    raw_amount=str(amount["amount"]),
                    decimals=decimals,
                ))
        except (KeyError, TypeError, ValueError) as exc:
            raise RpcError(method, f"unexpected payload: {exc!r}") from exc
        LOG.debug("%s: %d token accounts for %s", method, len(entries), owner)
        return entries

    def get_balance(self, address: str) -> int:
        """Native balance in lamports."""
        method = "getBalance"
        result = self.call(method, [address])
        try:
            value = result["value"]
        except (KeyError, TypeError) as exc:
            raise RpcError(method, f"unexpected payload: {exc!r}") from exc
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise RpcError(method, f"invalid lamports value {value!r}")
        return value

    def get_latest_signature(self, address: str) -> Optional[SignatureRecord]:
        """Most recent signature for `address`, or None if it has never been used."""
        method = "getSignaturesForAddress"
        result = self.call(method, [address, {"limit": 1}])
        if not isinstance(result, list):
            raise RpcError(method, "result is not a list")
        if not result:
            return None
        first = result[0]
        try:
            return SignatureRecord(
                signature=str(first["signature"]),
                block_time=int(first.get("blockTime") or 0),
                confirmation_status=str(first.get("confirmationStatus") or ""),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise RpcError(method, f"unexpected payload: {exc!r}") from exc
