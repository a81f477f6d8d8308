"""Exception types raised by the learning core."""


class PongNetError(Exception):
    """Base class for all PongNet errors."""


class UninitializedStateError(PongNetError):
    """Game state required by the core is missing or invalid."""


class LoopStateError(PongNetError):
    """Illegal transition of the learning loop state machine."""
