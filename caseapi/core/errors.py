from __future__ import annotations


class CaseApiError(Exception):
    """Base exception for this project."""


class ConfigError(CaseApiError):
    """Raised when configuration or the case catalog is invalid or incomplete."""

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class CaseNotFoundError(CaseApiError):
    def __init__(self, case_id: str):
        super().__init__(f"Unknown case {case_id!r}")
        self.case_id = case_id


class UnsupportedRewardError(CaseApiError):
    """Raised when a reward without a concrete type is applied."""


class RewardApplyError(CaseApiError):
    """Normalized failure raised by a gateway while applying a reward.

    Carries a stable error type so callers can log it without inspecting
    the underlying platform exception.
    """

    def __init__(self, error_type: str, message: str, *, details: dict[str, str] | None = None):
        super().__init__(message)
        self.error_type = error_type
        self.message = message
        self.details = details or {}
