"""Backend collaborators for the question catalog."""

from .client import QuestionBankClient

__all__ = [
    "QuestionBankClient",
]
