"""Exception hierarchy for the annotation pipeline.

InvalidSequenceError is raised before any transaction is opened.
StorageError wraps failures reported by DuckDB. AnnotationFailedError is the
single aggregate failure surfaced once a transaction has been rolled back, and
RollbackFailedError marks the case where the rollback itself failed, so the
store may hold partial state.
"""


class AnnotationError(Exception):
    """Base class for all protein annotator errors."""


class InvalidSequenceError(AnnotationError, ValueError):
    """Input sequence or metadata violates the input policy."""


class StorageError(AnnotationError):
    """A storage operation (insert, update, commit, rollback) failed."""


class ProteinNotFoundError(AnnotationError, LookupError):
    """No protein exists with the requested identifier."""


class AnnotationFailedError(AnnotationError):
    """Annotation aborted; the transaction was rolled back.

    Attributes:
        stage: Last state the annotation reached before failing
    """

    def __init__(self, message: str, stage: str):
        super().__init__(message)
        self.stage = stage


class RollbackFailedError(AnnotationFailedError):
    """Rollback after a failed annotation also failed.

    Attributes:
        rollback_error: Exception raised by the rollback attempt
    """

    def __init__(self, message: str, stage: str, rollback_error: BaseException):
        super().__init__(message, stage)
        self.rollback_error = rollback_error
