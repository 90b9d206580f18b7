class AccessSimError(Exception):
    """
    Base exception for all caller-facing simulator failures.

    Denials are never raised; they are returned as Decision values.
    """

    pass


class PolicyConfigurationError(AccessSimError):
    """
    Raised when a room policy table is misconfigured or invalid.
    """

    pass


class InvalidBatchError(AccessSimError):
    """
    Raised when a request batch is missing, is not a list, or contains a
    malformed request. Nothing from the batch reaches the evaluator.
    """

    pass


class InvalidTimeError(AccessSimError, ValueError):
    """
    Raised when a time-of-day string is not "HH:MM".
    """

    pass
