"""
NutriTrack Backend — Exception Hierarchy
=========================================

What:  Application exceptions for faults nobody expects to happen.
Why:   Expected outcomes (a missing document, an invalid payload, a store
       error on a single call) travel as `Failure` results, not exceptions.
       What is left are bootstrap and programming faults; giving them a
       common base lets the catch-all handler log their context.
Who:   Raised by the store bootstrap; rendered by the handlers in main.py.

Exception Hierarchy:
    NutriTrackError (base)        → 500 via the catch-all handler
    └── ConfigurationError        → startup aborts, never reaches a request
"""

from typing import Any, Dict, Optional


class NutriTrackError(Exception):
    """
    Base exception for all NutriTrack application errors.

    Attributes:
        message:  Human-readable description (returned in the 500 envelope)
        context:  Extra debug info (logged, never returned to the client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigurationError(NutriTrackError):
    """
    Raised when the document store client cannot be built from settings.

    When:  A credentials file is configured and present but cannot be
           loaded, or the SDK rejects the project/database combination.
    """

    def __init__(
        self,
        message: str = "Document store configuration is invalid",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
