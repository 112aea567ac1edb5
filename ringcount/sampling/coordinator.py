"""
Runs several walks at once from evenly spaced start keys and sums what they saw.

Each walk owns its own state; the only meeting point is the gather at the end.
"""

import asyncio

from ringcount.chord.client import RemoteNodeQuery
from ringcount.estimation.errors import ZeroCoverageError
from ringcount.logging_utils import get_logger
from ringcount.ring.keyspace import RingSpace
from ringcount.sampling.errors import WalkError
from ringcount.sampling.models import Aggregate, WalkResult
from ringcount.sampling.walker import sample_walk

logger = get_logger(__name__)


async def _run_walk(
    node_query: RemoteNodeQuery,
    ring: RingSpace,
    start_key: int,
    entry_address: str,
    hops: int,
) -> WalkResult | None:
    try:
        return await sample_walk(node_query, ring, start_key, entry_address, hops)
    except WalkError as e:
        logger.error(str(e))
        return None


async def sample_ring(
    node_query: RemoteNodeQuery,
    ring: RingSpace,
    entry_address: str,
    walks: int,
    hops: int,
    base: int | None = None,
) -> Aggregate:
    if walks < 1:
        raise ValueError(f"walks must be positive, got {walks}")

    start_keys = ring.start_keys(walks, base)
    logger.info(f"Starting {walks} walks of {hops} hops via {entry_address}")

    results = await asyncio.gather(
        *(_run_walk(node_query, ring, start_key, entry_address, hops) for start_key in start_keys)
    )
    aggregate = Aggregate.from_results(list(results))

    if aggregate.failed_walks:
        logger.warning(f"{aggregate.failed_walks}/{aggregate.walks} walks failed")
    if aggregate.area == 0:
        raise ZeroCoverageError(aggregate.walks)

    logger.debug(f"Aggregate: {aggregate}")
    return aggregate
