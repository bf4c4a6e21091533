"""Exceptions for hostprep workflows."""


class HostprepError(RuntimeError):
    """Base exception for hostprep errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class FatalError(HostprepError):
    """Unrecoverable failure; the whole process must stop with a non-zero status."""

    pass


class StepAborted(HostprepError):
    """The current step was abandoned; control returns to the menu."""

    pass
