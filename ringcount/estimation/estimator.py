from math import isqrt, log2
from typing import Any

from pydantic import BaseModel

from ringcount.estimation.errors import DegenerateEstimateError, ZeroCoverageError, ZeroUptimeError
from ringcount.logging_utils import get_logger
from ringcount.sampling.models import Aggregate

logger = get_logger(__name__)


class NetworkEstimate(BaseModel):
    """
    Attributes:
        visited (int): Nodes confirmed across all walks.
        estimated_total_nodes (int): Extrapolated network size.
        uncertainty (int): One standard deviation on the estimate.
        coverage_percent (float): Share of the estimated population the walks confirmed.
        relay_per_second (float): Distinct messages entering the network per second.
    """
    visited: int
    estimated_total_nodes: int
    uncertainty: int
    coverage_percent: float
    relay_per_second: float

    def to_output_dict(self, elapsed: float) -> dict[str, Any]:
        return {
            "visited": self.visited,
            "covered": self.coverage_percent,
            "Estimated": self.estimated_total_nodes,
            "uncertainty": self.uncertainty,
            "relayPS": self.relay_per_second,
            "time": elapsed,
        }


def estimate_total_nodes(visited: int, area: int, ring_size: int) -> int:
    # Uniform density: visited nodes live in `area`, so the whole ring holds visited * R / area
    if area <= 0:
        raise ZeroCoverageError(0)
    return visited * ring_size // area


def estimate_uncertainty(visited: int, area: int, ring_size: int) -> int:
    # visited is a poisson-ish count, std dev sqrt(visited), scaled like the estimate
    if area <= 0:
        raise ZeroCoverageError(0)
    return isqrt(visited) * ring_size // area


def estimate_relay_per_second(relay_total: int, uptime_total: int, estimated_total_nodes: int) -> float:
    """
    Per node relay rate times network size gives relay events per second. Each message
    is relayed about log2(N)/2 times crossing the ring, so divide that out.
    """
    if uptime_total <= 0:
        raise ZeroUptimeError()
    if estimated_total_nodes <= 1:
        raise DegenerateEstimateError(estimated_total_nodes)
    per_node_rate = relay_total / uptime_total
    return per_node_rate * estimated_total_nodes / (log2(estimated_total_nodes) / 2)


def estimate_network(aggregate: Aggregate, ring_size: int) -> NetworkEstimate:
    if aggregate.area <= 0:
        raise ZeroCoverageError(aggregate.walks)

    estimated_total_nodes = estimate_total_nodes(aggregate.visited, aggregate.area, ring_size)
    uncertainty = estimate_uncertainty(aggregate.visited, aggregate.area, ring_size)
    relay_per_second = estimate_relay_per_second(
        aggregate.relay_total, aggregate.uptime_total, estimated_total_nodes
    )

    estimate = NetworkEstimate(
        visited=aggregate.visited,
        estimated_total_nodes=estimated_total_nodes,
        uncertainty=uncertainty,
        coverage_percent=100 * aggregate.visited / estimated_total_nodes,
        relay_per_second=relay_per_second,
    )
    logger.debug(f"Estimate: {estimate}")
    return estimate
