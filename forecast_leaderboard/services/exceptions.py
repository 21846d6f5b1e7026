"""
Exceptions raised by the leaderboard services.
"""


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class InvalidFilterError(LeaderboardServiceError):
    """Raised when filter parameters are malformed (rejected before aggregating)."""
    pass


class LeaderboardNotFoundError(LeaderboardServiceError):
    """Raised when leaderboard data is not found."""
    pass


class LeaderboardViewServiceError(Exception):
    """Base exception for saved leaderboard view errors."""
    pass


class ViewLimitExceededError(LeaderboardViewServiceError):
    """Raised when a user already has the maximum number of saved views."""
    pass


class DuplicateViewNameError(LeaderboardViewServiceError):
    """Raised when a user already has a view with the same name."""
    pass


class ViewNotFoundError(LeaderboardViewServiceError):
    """Raised when the view doesn't exist or belongs to another user."""
    pass
