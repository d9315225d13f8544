from __future__ import annotations


class KubepickError(Exception):
    pass


class InvalidIdentifierError(KubepickError):
    def __init__(self, label: str, value: str, reason: str) -> None:
        super().__init__(f"Invalid {label} {value!r}: {reason}")
        self.label = label
        self.value = value


class ResourceListingError(KubepickError):
    def __init__(self, label: str, reason: str) -> None:
        super().__init__(f"Failed to fetch {label}: {reason}")
        self.label = label
        self.reason = reason


class ActionError(KubepickError):
    pass


class PreconditionError(KubepickError):
    pass


class ContextSwitchError(KubepickError):
    pass


class SelectionAlreadyCapturedError(KubepickError):
    pass


class SelectionCancelled(Exception):
    """Raised inside a workflow when the operator declines to choose."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or "selection cancelled")
        self.message = message
