import os
from typing import Any

import httpx
from dotenv import load_dotenv

from ringcount import constants as rcst
from ringcount.core.models.config import Config
from ringcount.ring.keyspace import RingSpace

load_dotenv()


def _positive_int(name: str, value: Any) -> int:
    as_int = int(value)
    if as_int < 1:
        raise ValueError(f"{name} must be a positive integer, got {value}")
    return as_int


def _positive_float(name: str, value: Any) -> float:
    as_float = float(value)
    if as_float <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return as_float


def _setting(overrides: dict[str, Any], key: str, env_var: str, default: Any) -> Any:
    """Explicit overrides (i.e. cli args) beat env vars, which beat the defaults."""
    value = overrides.get(key)
    if value is not None:
        return value
    return os.getenv(env_var, default)


def make_httpx_client(request_timeout: float, connect_timeout: float) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        timeout=httpx.Timeout(request_timeout, connect=connect_timeout),
        limits=httpx.Limits(keepalive_expiry=30),
    )


def factory_config(**overrides: Any) -> Config:
    rpc_address = _setting(overrides, "rpc_address", "RPC_ADDRESS", rcst.DEFAULT_RPC_ADDRESS)
    walks = _positive_int("walks", _setting(overrides, "walks", "WALKS", rcst.DEFAULT_WALKS))
    hops = _positive_int("hops", _setting(overrides, "hops", "HOPS", rcst.DEFAULT_HOPS))
    rpc_port = _positive_int("rpc_port", _setting(overrides, "rpc_port", "RPC_PORT", rcst.RPC_PORT))
    ring_bits = _positive_int("ring_bits", _setting(overrides, "ring_bits", "RING_BITS", rcst.RING_BITS))
    request_timeout = _positive_float(
        "request_timeout", _setting(overrides, "request_timeout", "REQUEST_TIMEOUT", rcst.REQUEST_TIMEOUT)
    )
    connect_timeout = _positive_float(
        "connect_timeout", _setting(overrides, "connect_timeout", "CONNECT_TIMEOUT", rcst.CONNECT_TIMEOUT)
    )
    rpc_retries = _positive_int("rpc_retries", _setting(overrides, "rpc_retries", "RPC_RETRIES", rcst.RPC_RETRIES))

    assert isinstance(rpc_address, str), "rpc_address must be a string"

    return Config(
        rpc_address=rpc_address.strip(),
        walks=walks,
        hops=hops,
        rpc_port=rpc_port,
        ring=RingSpace(bits=ring_bits),
        request_timeout=request_timeout,
        connect_timeout=connect_timeout,
        rpc_retries=rpc_retries,
        httpx_client=make_httpx_client(request_timeout, connect_timeout),
    )
