# Error taxonomy for the deck server.
# Each error carries the HTTP status it is surfaced as; server.py registers
# one exception handler per class that turns it into {"error": message}.


class DeckServerError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DeckServerError):
    """Malformed request body or deck id."""
    status_code = 400


class NotFound(DeckServerError):
    """Card missing from a deck, or reference data missing at its source."""
    status_code = 404


class StorageError(DeckServerError):
    """Read or write failure on the persistence backend."""
    status_code = 500


class Unavailable(DeckServerError):
    """Reference data source could not be reached or returned garbage."""
    status_code = 500
