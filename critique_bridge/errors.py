from __future__ import annotations

from typing import List, Optional


class CritiqueError(RuntimeError):
    pass


class InvalidInputError(CritiqueError):
    pass


class RemoteServiceError(CritiqueError):
    def __init__(self, message: str, *, model: Optional[str] = None) -> None:
        super().__init__(message)
        self.model = model


class MalformedResponseError(CritiqueError):
    def __init__(self, message: str, *, raw_text: str = "") -> None:
        super().__init__(message)
        self.raw_text = raw_text


class InconsistentResponseError(CritiqueError):
    def __init__(self, message: str, *, issues: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.issues = list(issues or [])


class SubmissionInProgressError(CritiqueError):
    pass
