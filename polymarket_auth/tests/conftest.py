"""
Shared fixtures: well-known test key, fixed clock, deterministic RNG
and a recording transport standing in for the exchange.
"""

import base64
import hashlib
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import orjson
import pytest

from polymarket_auth.api.transport import TransportResponse
from polymarket_auth.metrics import configure_metrics
from polymarket_auth.models import ApiCredentials

# Hardhat / Anvil account #0
HARDHAT_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
HARDHAT_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# Hardhat / Anvil account #1
SECOND_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
SECOND_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

FIXED_TIME = 1_700_000_000

TOKEN_ID = "71321045679252212594626385532706912750332728571942532289631379312455583992563"


class FixedClock:
    """Clock returning a settable unix time."""

    def __init__(self, now: int = FIXED_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now


class DeterministicRandom:
    """Reproducible byte stream: sha256 of a running counter."""

    def __init__(self, seed: bytes = b"polymarket-tests"):
        self.seed = seed
        self.counter = 0

    def __call__(self, n: int) -> bytes:
        out = b""
        while len(out) < n:
            out += hashlib.sha256(self.seed + self.counter.to_bytes(8, "big")).digest()
            self.counter += 1
        return out[:n]


@dataclass
class RecordedRequest:
    method: str
    path: str
    query: dict
    headers: dict
    body: Optional[bytes]

    def json(self) -> Any:
        return orjson.loads(self.body) if self.body else None


@dataclass
class FakeTransport:
    """
    Records every request and answers from a (method, path) table.

    A handler may be a (status, payload) tuple or a callable taking the
    RecordedRequest and returning one. Unrouted requests get 200 {}.
    """
    routes: dict = field(default_factory=dict)
    requests: list = field(default_factory=list)

    def route(self, method: str, path: str, handler: Any) -> None:
        self.routes[(method, path)] = handler

    def send(self, method, path, query=None, headers=None, body=None) -> TransportResponse:
        request = RecordedRequest(
            method=method,
            path=path,
            query=dict(query or {}),
            headers=dict(headers or {}),
            body=body,
        )
        self.requests.append(request)

        handler = self.routes.get((method, path), (200, {}))
        if callable(handler):
            handler = handler(request)
        status, payload = handler

        content = payload if isinstance(payload, bytes) else orjson.dumps(payload)
        return TransportResponse(status_code=status, content=content)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]


@pytest.fixture
def private_key() -> str:
    return HARDHAT_KEY


@pytest.fixture
def address() -> str:
    return HARDHAT_ADDRESS


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def deterministic_rng() -> DeterministicRandom:
    return DeterministicRandom()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def credentials() -> ApiCredentials:
    return ApiCredentials(
        api_key="6f1c7c4e-2b9d-4c9e-9d5b-0f2b8a1e3c77",
        secret=base64.urlsafe_b64encode(b"super-secret-hmac-key-32-bytes!!").decode(),
        passphrase="a3f9c2e1b7d4",
    )


@pytest.fixture
def metrics_registry():
    """Enable metrics into a private registry for the duration of a test."""
    from prometheus_client import CollectorRegistry

    registry = CollectorRegistry()
    configure_metrics(enabled=True, registry=registry)
    yield registry
    configure_metrics(enabled=False)
