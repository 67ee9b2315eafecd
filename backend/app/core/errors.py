class UpstreamDataError(Exception):
    """Raised when an upstream feed is unreachable or returns unusable data."""
