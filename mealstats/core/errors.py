"""
core/errors.py
--------------
Error taxonomy for the statistics engine.

  UnassignedCompanyError → a supervisor identity with no company. A
                           configuration problem the user has to get fixed;
                           retrying will not help.
  InvalidWindowError     → a date window that cannot be built (missing custom
                           start, unparsable date, unknown kind).
  FetchError             → the data source failed (or timed out). Transient,
                           safe to retry at the caller's discretion.

An empty scope (provider without companies) is NOT an error: it is a valid
all-zero dashboard and is handled without raising.
"""


class StatsError(Exception):
    """Base class for errors surfaced at the stats facade boundary."""

    kind: str = "stats_error"
    retryable: bool = False


class UnassignedCompanyError(StatsError):
    kind = "unassigned_company"
    retryable = False

    def __init__(self, message: str = "no company currently assigned") -> None:
        super().__init__(message)


class FetchError(StatsError):
    kind = "fetch_failed"
    retryable = True

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidWindowError(StatsError):
    kind = "invalid_window"
    retryable = False
