"""Exceptions raised by the question catalog engine."""


class QuestionBankError(Exception):
    """Base class for catalog errors."""

    pass


class QueryFailed(QuestionBankError):
    """A record query could not be completed. The result set is unchanged."""

    pass


class InvariantViolation(QuestionBankError):
    """Backend data broke an invariant the engine relies on (logged, not raised)."""

    pass


class EmptySelection(QuestionBankError):
    """An export was requested without any question identifiers."""

    pass


class InvalidSelection(QuestionBankError):
    """An export request contained repeated identifiers."""

    pass


class ExportFailed(QuestionBankError):
    """The backend could not render the export."""

    pass


class BackendError(QuestionBankError):
    """A create, update or delete request failed."""

    pass


class InvalidQuestion(QuestionBankError):
    """A question draft is not complete enough to be saved."""

    pass
