"""
Domain exceptions for analytics app.

This module defines domain-specific exceptions that are raised by the
analytics layer. These exceptions represent invalid statistics queries,
separate from HTTP concerns.

Exception Hierarchy:
    AnalyticsServiceError (base)
    ├── InvalidGranularityError
    ├── InvalidPeriodError
    └── InvalidRankKeyError

Usage:
    from apps.analytics.exceptions import InvalidGranularityError

    if granularity not in GRANULARITIES:
        raise InvalidGranularityError(f"Invalid granularity: {granularity}")
"""


class AnalyticsServiceError(Exception):
    """
    Base exception for all analytics errors.

    All domain-specific exceptions in the analytics app inherit from this
    class, making it easy to catch all analytics errors in views:

        try:
            data = StatisticsQueries.distribution(user_id, granularity='day')
        except AnalyticsServiceError as e:
            return Response({'error': str(e)}, status=400)
    """

    pass


class InvalidGranularityError(AnalyticsServiceError):
    """
    Raised when an invalid time granularity is specified.

    Valid granularities are: week, month, year.

    Example:
        raise InvalidGranularityError(
            "Invalid granularity: 'day'. Valid options: week, month, year"
        )
    """

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """
    Raised when a period label does not match its granularity.

    Labels look like '2025-03周', '2025-03月' or '2025年'.

    Example:
        raise InvalidPeriodError("Invalid month period '2025-13月'")
    """

    pass


class InvalidRankKeyError(AnalyticsServiceError):
    """
    Raised when ranking by an unsupported key.

    Valid keys are: category, ip.

    Example:
        raise InvalidRankKeyError("Invalid rank key: 'character'")
    """

    pass
