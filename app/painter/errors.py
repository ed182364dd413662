"""Error types for the painter module.

Grid and request problems are caught at the boundary, before any I/O happens.
"""


class PainterError(Exception):
    """Base exception for grid and request errors."""

    pass


class GridShapeError(PainterError):
    """Raised when a grid does not have exactly 7 rows of 53 columns."""

    pass


class GridFormatError(PainterError):
    """Raised when a grid document cannot be interpreted (bad version, cell type, preset)."""

    pass


class InvalidRequestError(PainterError):
    """Raised when a generation request is missing fields or carries invalid values."""

    pass
