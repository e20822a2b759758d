class SeatingInputError(ValueError):
    """Raised when a seating request cannot produce any layout."""


class StudentImportError(ValueError):
    """Raised when a roster file cannot be read or is missing columns."""
