"""Error types surfaced by the JobPrep services.

Every error carries a user-facing message and the HTTP status the API maps
it to. Collaborator failures are never retried here; the caller decides.
"""


class JobPrepError(Exception):
    """Base class for all service errors."""

    code = "error"
    status_code = 500
    default_message = "Something went wrong"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(JobPrepError):
    code = "not_found"
    status_code = 404
    default_message = "Not found"


class GenerationFailedError(JobPrepError):
    code = "generation_failed"
    status_code = 502
    default_message = "Could not generate test, try again"


class AlreadyCompletedError(JobPrepError):
    code = "already_completed"
    status_code = 409
    default_message = "Test already completed"


class PersistenceFailedError(JobPrepError):
    code = "persistence_failed"
    status_code = 503
    default_message = "Could not save changes, try again"


class ParseFailedError(JobPrepError):
    """Resume parser returned no usable data. Non-fatal for uploads."""

    code = "parse_failed"
    status_code = 502
    default_message = "Resume parsing failed"


class SearchFailedError(JobPrepError):
    code = "search_failed"
    status_code = 502
    default_message = "Job search failed"


class InvalidQuestionError(JobPrepError):
    code = "invalid_question"
    status_code = 422
    default_message = "Unknown question id"


class UnsupportedFileError(JobPrepError):
    code = "unsupported_file"
    status_code = 400
    default_message = "Please upload a PDF, Word document, or text file"
