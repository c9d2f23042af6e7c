class SearchServiceException(Exception):
    """Base exception for external movie search errors."""
    pass

class SearchConfigurationException(SearchServiceException):
    """Raised when the movie database API key is not configured."""
    pass

class SearchFailedException(SearchServiceException):
    """Raised when the movie database API returns an error or cannot be reached."""
    pass
