"""
Engine-level errors.

The web layer maps these onto HTTP responses; the batch worker catches
them per item.
"""


class MatchEngineError(Exception):
    """Base class for match engine failures."""


class NotFoundError(MatchEngineError):
    """A required input record does not exist."""

    def __init__(self, resource: str, identifier):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id):
        super().__init__("Student", student_id)


class ListingNotFoundError(NotFoundError):
    def __init__(self, listing_id):
        super().__init__("Listing", listing_id)


class BatchClaimError(MatchEngineError):
    """The worker could not claim its batch; fatal for the whole run."""
