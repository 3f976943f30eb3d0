# 📄 File: plant_health/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines all the special error types the plant doctor app uses to say exactly
# what went wrong (photo could not be saved, the AI could not read the plant, plant not found)
# instead of a generic "something broke".
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, and serialization for API responses. Covers the storage, diagnosis,
# record store and pipeline failure taxonomy.
# 🔗 Dependencies:
# FastAPI status constants, typing
# 🔄 Connected Modules / Calls From:
# All modules for error handling, exception handlers in plant_health.main,
# repositories, storage client, diagnosis oracles, upload pipeline

from typing import Any, Dict, Optional

from fastapi import status


class PlantHealthException(Exception):
    """
    Base exception class for the Plant Health application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format."""
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
                "status_code": self.status_code
            }
        }


# =============================================================================
# AUTHENTICATION
# =============================================================================

class AuthenticationError(PlantHealthException):
    """
    Exception raised for authentication failures.
    Used when the bearer token is missing, expired or invalid.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )


# =============================================================================
# INPUT VALIDATION
# =============================================================================

class ValidationError(PlantHealthException):
    """
    Exception raised for data validation failures.
    Used when required input is missing, e.g. no image supplied.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        constraint: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        if constraint:
            details["constraint"] = constraint

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class FileTooLargeError(PlantHealthException):
    """
    Exception raised when uploaded image exceeds allowed size.
    """
    def __init__(
        self,
        message: str = "Uploaded image is too large",
        max_size_mb: Optional[float] = None,
        actual_size_mb: Optional[float] = None,
        filename: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if max_size_mb is not None:
            details["max_size_mb"] = max_size_mb
        if actual_size_mb is not None:
            details["actual_size_mb"] = actual_size_mb
        if filename:
            details["filename"] = filename

        super().__init__(
            message=message,
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details=details,
            error_code="FILE_TOO_LARGE"
        )


class InvalidFileTypeError(PlantHealthException):
    """
    Exception raised when the uploaded file is not a supported image.
    """
    def __init__(
        self,
        message: str = "Invalid or unsupported image type",
        filename: Optional[str] = None,
        expected_types: Optional[list] = None,
        actual_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if filename:
            details["filename"] = filename
        if expected_types:
            details["expected_types"] = expected_types
        if actual_type:
            details["actual_type"] = actual_type

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            error_code="INVALID_FILE_TYPE"
        )


# =============================================================================
# OBJECT STORAGE
# =============================================================================

class StorageWriteError(PlantHealthException):
    """
    Exception raised when an image cannot be written to object storage.
    Covers quota, network and permission failures from the storage backend.
    """

    def __init__(
        self,
        message: str = "Failed to store image",
        bucket: Optional[str] = None,
        path: Optional[str] = None,
        reason: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if bucket:
            details["bucket"] = bucket
        if path:
            details["path"] = path
        if reason:
            details["reason"] = reason

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="STORAGE_WRITE_ERROR"
        )


# =============================================================================
# EXTERNAL APIS / DIAGNOSIS
# =============================================================================

class ExternalAPIError(PlantHealthException):
    """
    Exception raised for external API failures.
    Carries the upstream status code and response body when one was received.
    """

    def __init__(
        self,
        message: str = "External API error",
        api_name: Optional[str] = None,
        api_status_code: Optional[int] = None,
        api_response: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if api_name:
            details["api_name"] = api_name
        if api_status_code:
            details["api_status_code"] = api_status_code
        if api_response:
            details["api_response"] = api_response

        self.api_name = api_name
        self.api_status_code = api_status_code
        self.api_response = api_response

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="EXTERNAL_API_ERROR"
        )


class DiagnosisError(PlantHealthException):
    """
    Exception raised when the diagnosis oracle cannot produce a result.
    """

    def __init__(
        self,
        message: str = "Plant diagnosis failed",
        provider: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        error_code: str = "DIAGNOSIS_ERROR"
    ):
        if not details:
            details = {}
        if provider:
            details["provider"] = provider

        self.provider = provider

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code=error_code
        )


class DiagnosisTransportError(DiagnosisError):
    """
    The oracle could not be reached or answered with a non-success status.
    """

    def __init__(
        self,
        message: str = "Diagnosis service request failed",
        provider: Optional[str] = None,
        upstream_status: Optional[int] = None,
        upstream_body: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        if upstream_body:
            details["upstream_body"] = upstream_body

        self.upstream_status = upstream_status
        self.upstream_body = upstream_body

        super().__init__(
            message=message,
            provider=provider,
            details=details,
            error_code="DIAGNOSIS_TRANSPORT_ERROR"
        )


class DiagnosisParseError(DiagnosisError):
    """
    The oracle answered but its payload is not a valid diagnosis.
    """

    def __init__(
        self,
        message: str = "Diagnosis response could not be parsed",
        provider: Optional[str] = None,
        raw_content: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}
        if raw_content:
            details["raw_content"] = raw_content[:500]

        self.raw_content = raw_content

        super().__init__(
            message=message,
            provider=provider,
            details=details,
            error_code="DIAGNOSIS_PARSE_ERROR"
        )


# =============================================================================
# RECORD STORE
# =============================================================================

class NotFoundError(PlantHealthException):
    """
    Exception raised when requested resource is not found.
    Also raised for records owned by someone else, so their existence is not revealed.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class PlantNotFoundError(NotFoundError):
    """
    Exception raised when a plant is not found for the current owner.
    """

    def __init__(self, plant_id: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Plant not found: {plant_id}",
            resource_type="plant",
            resource_id=str(plant_id),
            details=details
        )


class TreatmentNotFoundError(NotFoundError):
    """
    Exception raised when a treatment step is not found for the current owner.
    """

    def __init__(self, treatment_id: Any, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Treatment not found: {treatment_id}",
            resource_type="treatment",
            resource_id=str(treatment_id),
            details=details
        )


class ConflictError(PlantHealthException):
    """
    Exception raised for resource conflicts.
    Used for identifier collisions and duplicate treatment steps.
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: Optional[str] = None,
        conflict_field: Optional[str] = None,
        existing_value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if conflict_field:
            details["conflict_field"] = conflict_field
        if existing_value is not None:
            details["existing_value"] = str(existing_value)

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code="CONFLICT_ERROR"
        )


class DatabaseError(PlantHealthException):
    """
    Exception raised for database operation failures.
    Used for connection issues, query failures, etc.
    """

    def __init__(
        self,
        message: str = "Database error",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="DATABASE_ERROR"
        )


# =============================================================================
# PIPELINE
# =============================================================================

class PipelineError(PlantHealthException):
    """
    Exception raised when the upload-diagnose-persist pipeline stops at a stage.

    The original stage error is kept as ``cause`` (and ``__cause__``), and its HTTP
    status is reused so an upload failure still reads as a gateway error, a
    missing plant as 404, and so on.
    """

    def __init__(self, stage: str, cause: PlantHealthException):
        self.stage = stage
        self.cause = cause

        super().__init__(
            message=f"Plant diagnosis failed during {stage}: {cause.message}",
            status_code=cause.status_code,
            details={
                "stage": stage,
                "cause": cause.error_code,
                "cause_details": cause.details,
            },
            error_code=f"PIPELINE_{stage.upper()}_FAILED"
        )


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================

def is_client_error(exception: Exception) -> bool:
    """Check whether an exception maps to a 4xx response."""
    if isinstance(exception, PlantHealthException):
        return 400 <= exception.status_code < 500
    return False


def is_server_error(exception: Exception) -> bool:
    """Check whether an exception maps to a 5xx response."""
    if isinstance(exception, PlantHealthException):
        return exception.status_code >= 500
    return True
