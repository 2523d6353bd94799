"""
This file contains custom, application-specific exceptions.
"""
from typing import Any, Optional


class ScheduleValidationError(Exception):
    """
    Raised when a new schedule entry (or a profile setting) violates a
    creation-time constraint. Nothing is persisted when this is raised.
    """
    def __init__(self, constraint: str, message: str):
        super().__init__(message)
        self.constraint = constraint
        self.message = message


class NotFoundError(Exception):
    """Raised when an Activity, Entry or User identifier does not exist for the caller."""
    def __init__(self, resource: str, identifier: Any):
        super().__init__(f"{resource} '{identifier}' not found.")
        self.resource = resource
        self.identifier = identifier


class MalformedInputError(Exception):
    """
    Raised when a stored record does not have the shape of a schedule entry.
    The aggregator skips such records instead of failing the whole view.
    """
    def __init__(self, reason: str, record_id: Optional[str] = None):
        super().__init__(f"Malformed record {record_id or '<unknown>'}: {reason}")
        self.reason = reason
        self.record_id = record_id
