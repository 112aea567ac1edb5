from ringcount.errors import RingCountError


class WalkError(RingCountError):
    """A single walk failed before it confirmed any node. Never fatal to the run."""

    def __init__(self, start_key: int, message: str):
        self.start_key = start_key
        super().__init__(f"Walk from {start_key:x}: {message}")

class EntryLookupError(WalkError):
    def __init__(self, start_key: int, address: str, cause: Exception):
        self.address = address
        self.cause = cause
        super().__init__(start_key, f"findsuccessoraddrs via {address} failed: {cause}")

class NoSuccessorsFoundError(WalkError):
    def __init__(self, start_key: int, address: str):
        self.address = address
        super().__init__(start_key, f"{address} returned no successor addresses")

class NoNodesConfirmedError(WalkError):
    def __init__(self, start_key: int, cause: Exception | None = None):
        self.cause = cause
        message = "no node could be queried"
        if cause is not None:
            message = f"{message} ({cause})"
        super().__init__(start_key, message)
