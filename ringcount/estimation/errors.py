from ringcount.errors import RingCountError


class EstimationError(RingCountError):
    """Aggregate level failure. Nothing meaningful can be reported after one of these."""
    pass

class ZeroCoverageError(EstimationError):
    def __init__(self, walks: int):
        self.walks = walks
        super().__init__(f"Total area covered by {walks} walk(s) is zero, cannot estimate total number of nodes.")

class ZeroUptimeError(EstimationError):
    def __init__(self):
        super().__init__("Total uptime is zero, relay rate is undefined.")

class DegenerateEstimateError(EstimationError):
    def __init__(self, estimated_total_nodes: int):
        self.estimated_total_nodes = estimated_total_nodes
        super().__init__(f"Estimated {estimated_total_nodes} node(s); need more than 1 to derive hop count.")
