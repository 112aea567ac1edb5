import json
from typing import Any, Iterable, Protocol

import httpx
from pydantic import ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from ringcount import constants as rcst
from ringcount.chord.errors import AllCandidatesFailedError, InvalidAddressError, RpcError, RpcResponseError
from ringcount.chord.models import ChordRingInfo, ChordRingInfoResponse, RpcRequest, SuccessorAddrsResponse
from ringcount.logging_utils import get_logger

logger = get_logger(__name__)


class RemoteNodeQuery(Protocol):
    """What a walk needs from the network. ChordRpcClient is the http implementation."""

    async def find_successors(self, key: int, address: str) -> list[str]: ...

    async def query(self, address: str) -> ChordRingInfo: ...

    def rpc_address(self, peer_addr: str) -> str: ...


def tcp_addr_to_rpc_addr(tcp_addr: str, rpc_port: int = rcst.RPC_PORT) -> str:
    """
    Nodes advertise their p2p address (e.g. tcp://1.2.3.4:30001). The rpc server
    listens on the same host, on a well known port.
    """
    try:
        host = httpx.URL(tcp_addr).host
    except (httpx.InvalidURL, TypeError) as e:
        raise InvalidAddressError(tcp_addr, str(e)) from e
    if not host:
        raise InvalidAddressError(tcp_addr)
    # httpx hands back ipv6 hosts unbracketed
    if ":" in host:
        host = f"[{host}]"
    return f"http://{host}:{rpc_port}"


async def make_rpc_request(
    httpx_client: httpx.AsyncClient,
    server_address: str,
    method: str,
    params: dict[str, Any] | None = None,
    timeout: httpx.Timeout | float = rcst.REQUEST_TIMEOUT,
) -> dict[str, Any]:
    payload = RpcRequest(method=method, params=params or {}).model_dump()

    response = await httpx_client.post(
        content=json.dumps(payload).encode(),
        timeout=timeout,
        headers={"Content-Type": "application/json"},
        url=server_address,
    )
    response.raise_for_status()

    try:
        body = response.json()
    except ValueError as e:
        raise RpcResponseError(server_address, method, f"invalid json: {e}") from e

    if not isinstance(body, dict):
        raise RpcResponseError(server_address, method, "response is not an object")
    if body.get("error"):
        raise RpcResponseError(server_address, method, f"node returned error {body['error']}")
    return body


class ChordRpcClient:
    """
    Talks json rpc to chord nodes.

    Timeouts come from the shared httpx client unless one is given here. Transport
    errors are retried `retries - 1` times; the default of 1 means a single attempt.
    """

    def __init__(
        self,
        httpx_client: httpx.AsyncClient,
        rpc_port: int = rcst.RPC_PORT,
        timeout: httpx.Timeout | float | None = None,
        retries: int = rcst.RPC_RETRIES,
    ) -> None:
        if retries < 1:
            raise ValueError(f"retries must be at least 1, got {retries}")
        self.httpx_client = httpx_client
        self.rpc_port = rpc_port
        self.timeout = timeout if timeout is not None else httpx_client.timeout
        self.retries = retries

    async def _call(self, address: str, method: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        @retry(
            stop=stop_after_attempt(self.retries),
            wait=wait_exponential(multiplier=1, min=1, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        async def make_rpc_call() -> dict[str, Any]:
            return await make_rpc_request(self.httpx_client, address, method, params, timeout=self.timeout)

        logger.debug(f"{method} -> {address}")
        try:
            return await make_rpc_call()
        except httpx.InvalidURL as e:
            raise InvalidAddressError(address, str(e)) from e

    async def find_successors(self, key: int, address: str) -> list[str]:
        method = rcst.FIND_SUCCESSOR_ADDRS_METHOD
        body = await self._call(address, method, {"key": format(key, "x")})
        try:
            return SuccessorAddrsResponse(**body).result
        except ValidationError as e:
            raise RpcResponseError(address, method, str(e)) from e

    async def query(self, address: str) -> ChordRingInfo:
        method = rcst.GET_CHORD_RING_INFO_METHOD
        body = await self._call(address, method, {})
        try:
            return ChordRingInfoResponse(**body).result
        except ValidationError as e:
            raise RpcResponseError(address, method, str(e)) from e

    def rpc_address(self, peer_addr: str) -> str:
        return tcp_addr_to_rpc_addr(peer_addr, self.rpc_port)


async def query_first(node_query: RemoteNodeQuery, addresses: Iterable[str]) -> tuple[str, ChordRingInfo]:
    """
    Query candidate addresses in order and return the first one that answers.

    Args:
        node_query (RemoteNodeQuery): Used to reach the nodes.
        addresses (Iterable[str]): Rpc addresses, most preferred first.

    Returns:
        tuple[str, ChordRingInfo]: The address that answered and its snapshot.

    Raises:
        AllCandidatesFailedError: If no candidate answered. Holds every attempt's error.
    """
    attempts: list[tuple[str, Exception]] = []
    for address in addresses:
        try:
            return address, await node_query.query(address)
        except (httpx.HTTPError, RpcError) as e:
            logger.debug(f"Candidate {address} failed: {e}")
            attempts.append((address, e))
    raise AllCandidatesFailedError(attempts)
