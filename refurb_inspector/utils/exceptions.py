"""
Custom exception classes for refurbishment inspection.

This module defines the exception hierarchy for the application shell around
the evidence engine. The engine itself never raises for missing facts; these
exceptions cover probe failures (always resolved to an absent fact by the
collector) and invalid user-supplied files.
"""


class RefurbInspectorError(Exception):
    """
    Base exception class for all refurb inspector errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary containing additional error context
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the base exception.

        Args:
            message: Error message describing what went wrong
            details: Optional dictionary with additional context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return a string representation of the exception."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ProbeError(RefurbInspectorError):
    """
    Raised when a platform probe cannot determine its fact.

    Covers a missing OS utility, a non-zero exit status, a timeout, or
    output the probe could not parse. The fact collector catches this and
    records the fact as absent.

    Attributes:
        probe: Name of the probe that failed (e.g. 'serial_number')
        reason: Specific reason for the failure
        cause: Optional underlying exception
    """

    def __init__(self, probe: str, reason: str = None, cause: Exception = None):
        self.probe = probe
        self.reason = reason or "Probe failed"
        self.cause = cause

        message = f"Probe '{probe}' failed. {self.reason}"

        details = {"probe": probe}
        if cause:
            details["cause"] = str(cause)
            details["cause_type"] = type(cause).__name__

        super().__init__(message, details)


class FactsLoadError(RefurbInspectorError):
    """
    Raised when a captured facts file cannot be loaded.

    Attributes:
        file_path: Path to the facts file
        reason: Specific reason (missing, unsupported format, invalid content)
    """

    def __init__(self, file_path: str, reason: str = None):
        self.file_path = file_path
        self.reason = reason or "Facts file could not be loaded"

        message = f"Failed to load facts: {file_path}. {self.reason}"

        super().__init__(message, {"file_path": file_path})


class RulesConfigError(RefurbInspectorError):
    """
    Raised when a custom rules or configuration file is invalid.

    Attributes:
        file_path: Path to the offending file
        reason: Specific reason for the failure
    """

    def __init__(self, file_path: str, reason: str = None):
        self.file_path = file_path
        self.reason = reason or "Invalid rules file"

        message = f"Invalid rules configuration: {file_path}. {self.reason}"

        super().__init__(message, {"file_path": file_path})


class ProfileNotFoundError(RefurbInspectorError):
    """
    Raised when a vendor profile name is not registered.

    Attributes:
        name: The requested profile name
        available: Names of the registered profiles
    """

    def __init__(self, name: str, available: list = None):
        self.name = name
        self.available = sorted(available or [])

        message = f"Unknown vendor profile: {name}"
        details = {}
        if self.available:
            details["available"] = ", ".join(self.available)

        super().__init__(message, details)
