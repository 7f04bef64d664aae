class BillTrackerError(Exception):
    """Base class for errors the console reports to the user."""


class NotFoundError(BillTrackerError, LookupError):
    def __init__(self, kind: str, key: str):
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class ValidationError(BillTrackerError, ValueError):
    """Input rejected before it reaches the database."""
