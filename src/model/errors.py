"""Contains the exceptions raised by the tile grid model."""


class WFCError(Exception):
    """Base class of all errors raised by the tile grid model."""

    pass


class ConfigurationError(WFCError, ValueError):
    """Raised at construction time when grid dimensions, palette or rule table are invalid.

    Nothing is stepped before the configuration has been accepted, so no partial grid state is left behind.
    """

    pass


class ContractViolationError(WFCError):
    """Raised when a model operation is called in a state it does not support.

    This always indicates a defect in the calling code (e.g. collapsing a cell that is already resolved), never a
    property of the generated tiling, so it is not recovered from.
    """

    pass


class UnknownTileError(ContractViolationError, KeyError):
    """Raised when a tile value without an entry in the rule table is looked up."""

    pass


class OutOfBoundsError(ContractViolationError, IndexError):
    """Raised when a cell outside of the grid is accessed directly."""

    pass
