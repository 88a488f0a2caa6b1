"""
Student Applications Exceptions

Every error carries a human-readable message and a machine-readable
error_code so the form client can show one message and branch on the code.
"""


class ApplicationServiceError(Exception):
    """Base exception for application service errors."""

    def __init__(self, message: str, error_code: str):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class ApplicationValidationError(ApplicationServiceError):
    """Raised when submitted data fails one or more validation rules."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__(
            message="Validation failed",
            error_code="VALIDATION_FAILED",
        )


class DuplicateApplicationError(ApplicationServiceError):
    """Raised when an application for the same student already exists."""

    def __init__(self, existing_application_id: str):
        self.existing_application_id = existing_application_id
        super().__init__(
            message="A similar application already exists for this student",
            error_code="DUPLICATE_APPLICATION",
        )


class ApplicationNotFoundError(ApplicationServiceError):
    """Raised when an application is not found."""

    def __init__(self, application_id: str | None = None):
        self.application_id = application_id
        message = (
            f"Application {application_id} not found" if application_id else "Application not found"
        )
        super().__init__(
            message=message,
            error_code="APPLICATION_NOT_FOUND",
        )


class InternalProcessingError(ApplicationServiceError):
    """Raised when persistence or another required step fails unexpectedly."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(
            message="Internal server error. Please try again later.",
            error_code="INTERNAL_ERROR",
        )


class InvalidStatusError(ApplicationServiceError):
    """Raised when a status update names an unknown status."""

    def __init__(self, status: str):
        self.status = status
        super().__init__(
            message=f"Invalid application status: {status}",
            error_code="INVALID_STATUS",
        )


class RecordIntegrityError(ApplicationServiceError):
    """Raised when an update would break an application record invariant."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            error_code="RECORD_INTEGRITY",
        )
