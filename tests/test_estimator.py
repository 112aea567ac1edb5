"""Tests for turning an aggregate into a network estimate."""

import math

import pytest

from ringcount.estimation.errors import DegenerateEstimateError, ZeroCoverageError, ZeroUptimeError
from ringcount.estimation.estimator import (
    estimate_network,
    estimate_relay_per_second,
    estimate_total_nodes,
    estimate_uncertainty,
)
from ringcount.sampling.models import Aggregate

RING_SIZE = 0x100


def aggregate(visited=3, relay_total=30, uptime_total=300, area=0x8B):
    return Aggregate(
        visited=visited,
        relay_total=relay_total,
        uptime_total=uptime_total,
        area=area,
        walks=1,
        failed_walks=0,
    )


class TestThreeNodeScenario:
    """3 nodes seen across 0x8B of a 0x100 ring."""

    def test_estimate(self):
        estimate = estimate_network(aggregate(), RING_SIZE)

        assert estimate.visited == 3
        assert estimate.estimated_total_nodes == 5
        assert estimate.uncertainty == 1
        assert estimate.coverage_percent == pytest.approx(60.0)
        assert estimate.relay_per_second == pytest.approx(0.1 * 5 / (math.log2(5) / 2))

    def test_output_dict(self):
        output = estimate_network(aggregate(), RING_SIZE).to_output_dict(elapsed=1.5)

        assert output == {
            "visited": 3,
            "covered": pytest.approx(60.0),
            "Estimated": 5,
            "uncertainty": 1,
            "relayPS": pytest.approx(0.1 * 5 / (math.log2(5) / 2)),
            "time": 1.5,
        }


class TestMonotonicity:
    def test_non_decreasing_in_visited(self):
        estimates = [estimate_total_nodes(visited, 0x8B, RING_SIZE) for visited in range(0, 50)]
        assert estimates == sorted(estimates)

    def test_non_increasing_in_area(self):
        estimates = [estimate_total_nodes(10, area, RING_SIZE) for area in range(1, RING_SIZE)]
        assert estimates == sorted(estimates, reverse=True)

    def test_full_size_ring_stays_exact(self):
        ring_size = 2**256
        assert estimate_total_nodes(1000, ring_size // 1000, ring_size) == 1_000_000

    def test_uncertainty_uses_integer_sqrt(self):
        assert estimate_uncertainty(10, 0x80, RING_SIZE) == 3 * 2


class TestEstimationFailures:
    def test_zero_uptime(self):
        with pytest.raises(ZeroUptimeError):
            estimate_network(aggregate(uptime_total=0), RING_SIZE)

    def test_degenerate_node_count(self):
        # 1 node over the whole ring
        with pytest.raises(DegenerateEstimateError):
            estimate_network(aggregate(visited=1, area=RING_SIZE - 1), RING_SIZE)

    def test_zero_area(self):
        with pytest.raises(ZeroCoverageError):
            estimate_network(aggregate(area=0), RING_SIZE)

    def test_relay_rate_guards(self):
        with pytest.raises(ZeroUptimeError):
            estimate_relay_per_second(10, 0, 100)
        with pytest.raises(DegenerateEstimateError):
            estimate_relay_per_second(10, 10, 1)

    def test_zero_relay_is_fine(self):
        assert estimate_relay_per_second(0, 10, 100) == 0.0
