from dataclasses import dataclass


@dataclass(frozen=True)
class WalkResult:
    start_key: int
    nodes_visited: int
    relay_total: int
    uptime_total: int
    area: int


@dataclass(frozen=True)
class Aggregate:
    """Sums over every walk that returned a result. Failed walks only bump `failed_walks`."""
    visited: int
    relay_total: int
    uptime_total: int
    area: int
    walks: int
    failed_walks: int

    @classmethod
    def from_results(cls, results: list[WalkResult | None]) -> "Aggregate":
        completed = [result for result in results if result is not None]
        return cls(
            visited=sum(result.nodes_visited for result in completed),
            relay_total=sum(result.relay_total for result in completed),
            uptime_total=sum(result.uptime_total for result in completed),
            area=sum(result.area for result in completed),
            walks=len(results),
            failed_walks=len(results) - len(completed),
        )
