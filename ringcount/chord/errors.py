from ringcount.errors import RingCountError


class RpcError(RingCountError):
    """Base class for errors talking to a chord node over rpc."""
    pass

class RpcResponseError(RpcError):
    """Raised when a node answers, but not with a usable result."""

    def __init__(self, address: str, method: str, reason: str):
        self.address = address
        self.method = method
        self.reason = reason
        super().__init__(f"Bad {method} response from {address}: {reason}")

class InvalidAddressError(RpcError):
    """Raised when a peer address can't be turned into an rpc endpoint."""

    def __init__(self, address: str, reason: str = "no host"):
        self.address = address
        super().__init__(f"Can't derive rpc address from {address!r}: {reason}")

class AllCandidatesFailedError(RingCountError):
    """Raised when every candidate address for a hop failed to answer."""

    def __init__(self, attempts: list[tuple[str, Exception]]):
        self.attempts = attempts
        if attempts:
            details = "; ".join(f"{address}: {error}" for address, error in attempts)
        else:
            details = "no candidates given"
        super().__init__(f"All {len(attempts)} candidate(s) failed: {details}")
