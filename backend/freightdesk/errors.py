from __future__ import annotations

from typing import List, Optional


class FreightDeskError(Exception):
    pass


class ValidationFailure(FreightDeskError):
    """A request builder was handed a form missing required business fields."""

    def __init__(self, messages: List[str]):
        self.messages = list(messages)
        super().__init__("; ".join(self.messages) or "Validation failed")


class RecordStoreError(FreightDeskError):
    def __init__(self, message: str, status: Optional[int] = None,
                 retry_after: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.retry_after = retry_after
