class RingCountError(Exception):
    """Base class for all ringcount exceptions."""
    pass
