"""In-memory chord ring standing in for the rpc client."""

import json

import httpx
import pytest

from ringcount.chord.errors import InvalidAddressError, RpcResponseError
from ringcount.chord.models import ChordRingInfo, LocalNode, PeerInfo


def node_address(node_id: int) -> str:
    return f"node-{node_id:x}"


class FakeNodeQuery:
    """
    Every node lists its next `successor_count` nodes and previous `predecessor_count`
    nodes, nearest first, wrapping around the ring.
    """

    def __init__(
        self,
        ids: list[int],
        successor_count: int = 1,
        predecessor_count: int = 1,
        relay: int = 10,
        uptime: int = 100,
        down: tuple[int, ...] = (),
        bad_addrs: tuple[int, ...] = (),
        predecessor_overrides: dict[int, list[int]] | None = None,
    ) -> None:
        self.ids = sorted(ids)
        self.successor_count = successor_count
        self.predecessor_count = predecessor_count
        self.relay = relay
        self.uptime = uptime
        self.down = {node_address(node_id) for node_id in down}
        self.bad_addrs = set(bad_addrs)
        self.predecessor_overrides = predecessor_overrides or {}
        self.entry_result: list[str] | None = None
        self.entry_error: Exception | None = None
        self.entry_calls: list[tuple[int, str]] = []
        self.queries: list[str] = []

    def _advertised(self, node_id: int) -> PeerInfo:
        addr = f"garbage-{node_id:x}" if node_id in self.bad_addrs else node_address(node_id)
        return PeerInfo(addr=addr, id=node_id)

    def _neighbours(self, node_id: int, count: int, step: int) -> list[PeerInfo]:
        position = self.ids.index(node_id)
        count = min(count, len(self.ids) - 1)
        return [self._advertised(self.ids[(position + step * k) % len(self.ids)]) for k in range(1, count + 1)]

    def info(self, node_id: int) -> ChordRingInfo:
        if node_id in self.predecessor_overrides:
            predecessors = [PeerInfo(addr=node_address(p), id=p) for p in self.predecessor_overrides[node_id]]
        else:
            predecessors = self._neighbours(node_id, self.predecessor_count, -1)
        return ChordRingInfo(
            local_node=LocalNode(id=node_id, relay_message_count=self.relay, uptime=self.uptime),
            successors=self._neighbours(node_id, self.successor_count, 1),
            predecessors=predecessors,
        )

    async def find_successors(self, key: int, address: str) -> list[str]:
        self.entry_calls.append((key, address))
        if self.entry_error is not None:
            raise self.entry_error
        if self.entry_result is not None:
            return self.entry_result
        successor = next((node_id for node_id in self.ids if node_id >= key), self.ids[0])
        return [node_address(successor)]

    async def query(self, address: str) -> ChordRingInfo:
        self.queries.append(address)
        if address in self.down:
            raise httpx.ConnectError(f"{address} is down")
        for node_id in self.ids:
            if node_address(node_id) == address:
                return self.info(node_id)
        raise RpcResponseError(address, "getchordringinfo", "unknown node")

    def rpc_address(self, peer_addr: str) -> str:
        if not peer_addr.startswith("node-"):
            raise InvalidAddressError(peer_addr)
        return peer_addr


@pytest.fixture
def three_node_ring() -> FakeNodeQuery:
    return FakeNodeQuery([0x10, 0x40, 0x90])


@pytest.fixture
def sixteen_node_ring() -> FakeNodeQuery:
    return FakeNodeQuery([i * 0x10 for i in range(16)], successor_count=8, predecessor_count=8)


def http_ring_handler(entry_successors: list[str], nodes: dict[str, dict]):
    """MockTransport handler: any findsuccessoraddrs gets `entry_successors`, getchordringinfo is answered per host."""

    def handler(request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        if body["method"] == "findsuccessoraddrs":
            return httpx.Response(200, json={"result": entry_successors})
        node = nodes.get(request.url.host)
        if node is None:
            raise httpx.ConnectError(f"{request.url.host} unreachable", request=request)
        return httpx.Response(200, json={"result": node})

    return handler


# 0x10 at 10.0.0.1, 0x40 behind an ipv6 address; 0x40 is the last node with successors
HTTP_RING_NODES = {
    "10.0.0.1": {
        "localNode": {"id": "10", "relayMessageCount": 10, "uptime": 100},
        "successors": [{"addr": "tcp://[2001:db8::1]:30001", "id": "40"}],
        "predecessors": [],
    },
    "2001:db8::1": {
        "localNode": {"id": "40", "relayMessageCount": 10, "uptime": 100},
        "successors": [],
        "predecessors": [{"addr": "tcp://10.0.0.1:30001", "id": "10"}],
    },
}
