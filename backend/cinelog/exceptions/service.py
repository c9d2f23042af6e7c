class ServiceException(Exception):
    """Base exception for service operation errors."""
    pass

class InvalidInputException(ServiceException):
    """Raised when a payload is malformed, e.g. a rating outside 1..5. Nothing has been written."""
    pass

class DuplicateEntryException(ServiceException):
    """Raised on a second review or watchlist entry for the same (user, movie) pair."""
    pass

class ForbiddenException(ServiceException):
    """Raised when the acting user does not own the row being changed."""
    pass

class NotFoundException(ServiceException):
    """Raised when the target review, movie, profile or watchlist entry does not exist."""
    pass

class AggregationFailureException(ServiceException):
    """Raised when a movie's rating aggregate could not be recomputed.

    The surrounding review mutation has been rolled back; callers may retry the whole call.
    """
    pass
