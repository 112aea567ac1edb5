"""
One sampling walk around the chord ring.

A walk starts at the node responsible for a key and jumps forward through successor
lists, counting how many nodes it passed. The key space between the start key and the
last confirmed node is the area the walk observed.
"""

from math import isqrt

import httpx

from ringcount import constants as rcst
from ringcount.chord.client import RemoteNodeQuery, query_first
from ringcount.chord.errors import AllCandidatesFailedError, InvalidAddressError, RpcError
from ringcount.chord.models import ChordRingInfo
from ringcount.logging_utils import get_logger
from ringcount.ring.keyspace import RingSpace
from ringcount.sampling.errors import EntryLookupError, NoNodesConfirmedError, NoSuccessorsFoundError
from ringcount.sampling.models import WalkResult

logger = get_logger(__name__)


def _jump_indices(successor_count: int) -> list[int]:
    # floor(2 * sqrt(s)) == isqrt(4 * s), without float rounding on big lists
    mid = successor_count - isqrt(4 * successor_count)
    indices = [mid + delta for delta in rcst.CANDIDATE_SPREAD]
    return [index for index in indices if 0 <= index < successor_count]


def _next_candidates(node_query: RemoteNodeQuery, info: ChordRingInfo) -> list[str]:
    candidates = []
    for index in _jump_indices(len(info.successors)):
        peer_addr = info.successors[index].addr
        try:
            candidates.append(node_query.rpc_address(peer_addr))
        except InvalidAddressError as e:
            logger.warning(f"Skipping successor {index}: {e}")
    return candidates


async def _entry_candidates(node_query: RemoteNodeQuery, start_key: int, entry_address: str) -> list[str]:
    try:
        successor_addrs = await node_query.find_successors(start_key, entry_address)
    except (httpx.HTTPError, RpcError) as e:
        raise EntryLookupError(start_key, entry_address, e) from e

    if not successor_addrs:
        raise NoSuccessorsFoundError(start_key, entry_address)

    try:
        return [node_query.rpc_address(successor_addrs[0])]
    except InvalidAddressError as e:
        raise EntryLookupError(start_key, entry_address, e) from e


async def sample_walk(
    node_query: RemoteNodeQuery,
    ring: RingSpace,
    start_key: int,
    entry_address: str,
    hops: int,
) -> WalkResult:
    """
    Walk forward from `start_key` for up to `hops + 1` node queries.

    Stopping early (unreachable candidates, a node that doesn't list the previous one
    as predecessor, no successors) is not an error: whatever was confirmed so far is
    returned.

    Args:
        node_query (RemoteNodeQuery): Used to reach the nodes.
        ring (RingSpace): Key space the area is measured in.
        start_key (int): Key the walk starts from.
        entry_address (str): Rpc address of any node, used to locate `start_key`.
        hops (int): Hop budget.

    Returns:
        WalkResult: Counters and the area between `start_key` and the last confirmed node.

    Raises:
        EntryLookupError: If the entry node couldn't be asked for the start key's successor.
        NoSuccessorsFoundError: If the entry node knows no successor for the start key.
        NoNodesConfirmedError: If not a single node on the walk could be queried.
    """
    if hops < 0:
        raise ValueError(f"hops must not be negative, got {hops}")

    start_key = ring.reduce(start_key)
    candidates = await _entry_candidates(node_query, start_key, entry_address)

    nodes_visited = 0
    relay_total = 0
    uptime_total = 0
    last_key: int | None = None

    for hop in range(hops + 1):
        try:
            address, info = await query_first(node_query, candidates)
        except AllCandidatesFailedError as e:
            if last_key is None:
                raise NoNodesConfirmedError(start_key, e) from e
            logger.warning(f"Error getting chord ring info at hop {hop}: {e}")
            break

        if last_key is None:
            nodes_visited = 1
        else:
            position = info.predecessor_index(last_key)
            if position is None:
                logger.warning(f"Prev ID {last_key:x} not found in predecessors of {address}")
                break
            # Predecessors closer than the previous node are ones the jump skipped over
            nodes_visited += position + 1

        last_key = ring.reduce(info.local_node.id)
        relay_total += info.local_node.relay_message_count
        uptime_total += info.local_node.uptime

        if len(info.successors) < 1:
            logger.warning(f"Not enough successors at {address}")
            break

        candidates = _next_candidates(node_query, info)
        if not candidates:
            logger.warning(f"No usable successor address at {address}")
            break

    assert last_key is not None, "Walk loop exited without confirming a node"

    area = ring.forward_distance(start_key, last_key)
    logger.debug(f"Walk from {start_key:x} visited {nodes_visited} nodes up to {last_key:x}")
    return WalkResult(
        start_key=start_key,
        nodes_visited=nodes_visited,
        relay_total=relay_total,
        uptime_total=uptime_total,
        area=area,
    )
