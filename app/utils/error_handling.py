"""
Error Handling Module for PayDesk

This module provides centralized error handling with:
- Custom exception hierarchy
- Standardized error responses
- Error logging
- Database and external service error handling
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
import logging

from fastapi import FastAPI, Request, HTTPException, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import (
    SQLAlchemyError,
    IntegrityError,
    OperationalError,
    DataError,
)
from starlette.exceptions import HTTPException as StarletteHTTPException

# Configure logging
logger = logging.getLogger("paydesk.errors")


class ErrorCode(str, Enum):
    """Standardized error codes for the application"""

    # Validation Errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    INVALID_AMOUNT = "INVALID_AMOUNT"

    # Authentication/Authorization Errors (401/403)
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    TOKEN_INVALID = "TOKEN_INVALID"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_DISABLED = "ACCOUNT_DISABLED"

    # Resource Errors (404/409)
    NOT_FOUND = "NOT_FOUND"
    EMPLOYEE_NOT_FOUND = "EMPLOYEE_NOT_FOUND"
    COMPANY_NOT_FOUND = "COMPANY_NOT_FOUND"
    TRANSACTION_NOT_FOUND = "TRANSACTION_NOT_FOUND"
    RESOURCE_CONFLICT = "RESOURCE_CONFLICT"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # Payroll computation (400)
    PAYROLL_COMPUTATION_ERROR = "PAYROLL_COMPUTATION_ERROR"

    # External Service Errors (502)
    EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
    OPENAI_API_ERROR = "OPENAI_API_ERROR"

    # Dependency / Database Errors (500)
    DEPENDENCY_FAILURE = "DEPENDENCY_FAILURE"
    DATABASE_ERROR = "DATABASE_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    DATA_INTEGRITY_ERROR = "DATA_INTEGRITY_ERROR"

    # Internal Errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppException(Exception):
    """Base exception for all application exceptions"""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.field = field
        self.original_error = original_error
        self.timestamp = datetime.utcnow()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response"""
        result = {
            "code": self.code.value,
            "message": self.message,
            "timestamp": self.timestamp.isoformat() + "Z",
        }
        if self.field:
            result["field"] = self.field
        if self.details:
            result["details"] = self.details
        return result


# ============================================================================
# Validation Exceptions
# ============================================================================

class ValidationException(AppException):
    """Missing or malformed input. No retry, no partial effect."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
            field=field,
        )


class InvalidAmountException(ValidationException):
    """Invalid monetary amount"""

    def __init__(self, amount: Any, field: str = "amount", message: Optional[str] = None):
        super().__init__(
            message=message or f"Invalid amount: {amount}. Amount must be a positive number.",
            field=field,
            code=ErrorCode.INVALID_AMOUNT,
            details={"provided_amount": str(amount)},
        )


class PayrollComputationException(ValidationException):
    """Payroll aggregation received missing or invalid input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            field=field,
            code=ErrorCode.PAYROLL_COMPUTATION_ERROR,
        )


# ============================================================================
# Authentication/Authorization Exceptions
# ============================================================================

class AuthenticationException(AppException):
    """Base authentication exception"""

    def __init__(
        self,
        message: str = "Authentication required",
        code: ErrorCode = ErrorCode.UNAUTHORIZED,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class TokenInvalidException(AuthenticationException):
    """Token is invalid or expired"""

    def __init__(self, message: str = "Invalid or expired access token"):
        super().__init__(
            message=message,
            code=ErrorCode.TOKEN_INVALID,
        )


class InvalidCredentialsException(AuthenticationException):
    """Email/password pair did not match a principal"""

    def __init__(self):
        super().__init__(
            message="Incorrect email or password",
            code=ErrorCode.INVALID_CREDENTIALS,
        )


class AuthorizationException(AppException):
    """Authenticated but insufficient role or company scope"""

    def __init__(
        self,
        message: str = "Permission denied",
        required_permission: Optional[str] = None,
        code: ErrorCode = ErrorCode.FORBIDDEN,
    ):
        details = {}
        if required_permission:
            details["required_permission"] = required_permission
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


# ============================================================================
# Resource Exceptions
# ============================================================================

class NotFoundException(AppException):
    """Resource not found exception"""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        if message is None:
            if resource_id:
                message = f"{resource_type} with ID '{resource_id}' not found"
            else:
                message = f"{resource_type} not found"
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class EmployeeNotFoundException(NotFoundException):
    """Employee not found"""

    def __init__(self, employee_id: str):
        super().__init__(
            resource_type="Employee",
            resource_id=employee_id,
            code=ErrorCode.EMPLOYEE_NOT_FOUND,
        )


class CompanyNotFoundException(NotFoundException):
    """Company not found"""

    def __init__(self, company_id: Optional[str] = None):
        super().__init__(
            resource_type="Company",
            resource_id=company_id,
            code=ErrorCode.COMPANY_NOT_FOUND,
        )


class TransactionNotFoundException(NotFoundException):
    """Transaction not found"""

    def __init__(self, transaction_id: str):
        super().__init__(
            resource_type="Transaction",
            resource_id=transaction_id,
            code=ErrorCode.TRANSACTION_NOT_FOUND,
        )


class ConflictException(AppException):
    """Resource conflict exception"""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        code: ErrorCode = ErrorCode.RESOURCE_CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ):
        _details = details or {}
        if resource_type:
            _details["resource_type"] = resource_type
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=_details,
        )


class DuplicateEntryException(ConflictException):
    """Duplicate entry exception"""

    def __init__(
        self,
        resource_type: str,
        field: str,
        value: str,
    ):
        super().__init__(
            message=f"{resource_type} with {field} '{value}' already exists",
            resource_type=resource_type,
            code=ErrorCode.DUPLICATE_ENTRY,
            details={"field": field, "value": value},
        )


# ============================================================================
# External Service / Dependency Exceptions
# ============================================================================

class ExternalServiceException(AppException):
    """External service error exception"""

    def __init__(
        self,
        service_name: str,
        message: str,
        code: ErrorCode = ErrorCode.EXTERNAL_SERVICE_ERROR,
        original_error: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        _details = details or {}
        _details["service"] = service_name
        super().__init__(
            code=code,
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=_details,
            original_error=original_error,
        )


class OpenAIAPIException(ExternalServiceException):
    """OpenAI API error"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(
            service_name="OpenAI API",
            message=f"AI service error: {message}",
            code=ErrorCode.OPENAI_API_ERROR,
            original_error=original_error,
        )


class DependencyFailureException(AppException):
    """
    Identity store or document store failed part-way through a multi-step
    operation. The message returned to the caller never carries internals.
    """

    def __init__(
        self,
        operation: str,
        original_error: Optional[Exception] = None,
        compensated: bool = True,
    ):
        super().__init__(
            code=ErrorCode.DEPENDENCY_FAILURE,
            message=f"An internal error occurred while {operation}.",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"compensated": compensated},
            original_error=original_error,
        )


# ============================================================================
# Exception Handlers
# ============================================================================

def create_error_response(
    code: ErrorCode,
    message: str,
    status_code: int,
    details: Optional[Dict[str, Any]] = None,
    field: Optional[str] = None,
) -> JSONResponse:
    """Create a standardized error response"""
    error = {
        "code": code.value,
        "message": message,
        "timestamp": datetime.utcnow().isoformat() + "Z",
    }
    if field:
        error["field"] = field
    if details:
        error["details"] = details

    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle AppException"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"AppException: {exc.code.value} - {exc.message}",
        extra={
            "code": exc.code.value,
            "path": request.url.path,
            "method": request.method,
        },
        exc_info=exc.original_error,
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.to_dict()},
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTPException"""
    code_map = {
        400: ErrorCode.INVALID_INPUT,
        401: ErrorCode.UNAUTHORIZED,
        403: ErrorCode.FORBIDDEN,
        404: ErrorCode.NOT_FOUND,
        409: ErrorCode.RESOURCE_CONFLICT,
        422: ErrorCode.VALIDATION_ERROR,
        500: ErrorCode.INTERNAL_ERROR,
        502: ErrorCode.EXTERNAL_SERVICE_ERROR,
    }

    error_code = code_map.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    logger.warning(
        f"HTTPException: {exc.status_code} - {message}",
        extra={"path": request.url.path, "method": request.method},
    )

    return create_error_response(
        code=error_code,
        message=message,
        status_code=exc.status_code,
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body/query validation errors as 400 Bad Request"""
    errors = []
    for error in exc.errors():
        field = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field,
            "message": error["msg"],
            "type": error["type"],
        })

    logger.warning(
        f"ValidationError: {len(errors)} validation errors",
        extra={"path": request.url.path, "method": request.method},
    )

    return create_error_response(
        code=ErrorCode.VALIDATION_ERROR,
        message="Invalid input.",
        status_code=status.HTTP_400_BAD_REQUEST,
        details={"errors": errors},
    )


async def sqlalchemy_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy errors"""
    error_message = "A database error occurred"
    error_code = ErrorCode.DATABASE_ERROR
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    if isinstance(exc, IntegrityError):
        error_message = "Data integrity constraint violated"
        error_code = ErrorCode.DATA_INTEGRITY_ERROR
        error_str = str(exc.orig).lower() if exc.orig else ""
        if "unique" in error_str or "duplicate" in error_str:
            error_message = "A record with this value already exists"
            error_code = ErrorCode.DUPLICATE_ENTRY
            status_code = status.HTTP_409_CONFLICT
        elif "foreign key" in error_str:
            error_message = "Referenced record does not exist"
            status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(exc, OperationalError):
        error_message = "Database operation failed"
        error_code = ErrorCode.CONNECTION_ERROR
    elif isinstance(exc, DataError):
        error_message = "Invalid data format for database"
        status_code = status.HTTP_400_BAD_REQUEST

    logger.error(
        f"SQLAlchemyError: {type(exc).__name__} - {str(exc)}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )

    return create_error_response(
        code=error_code,
        message=error_message,
        status_code=status_code,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions"""
    logger.critical(
        f"UnhandledException: {type(exc).__name__} - {str(exc)}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )

    # Never expose internal error details
    return create_error_response(
        code=ErrorCode.INTERNAL_ERROR,
        message="An unexpected error occurred. Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI application"""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================================================
# Utility Functions
# ============================================================================

def validate_amount(amount: Any, field: str = "amount", allow_zero: bool = False):
    """Validate a monetary amount and return it as Decimal"""
    from decimal import Decimal, InvalidOperation

    try:
        value = Decimal(str(amount))
    except (TypeError, ValueError, InvalidOperation):
        raise InvalidAmountException(amount, field)
    if value < 0 or (not allow_zero and value == 0):
        raise InvalidAmountException(amount, field)
    return value


__all__ = [
    # Base
    "AppException",
    "ErrorCode",

    # Validation
    "ValidationException",
    "InvalidAmountException",
    "PayrollComputationException",

    # Auth
    "AuthenticationException",
    "TokenInvalidException",
    "InvalidCredentialsException",
    "AuthorizationException",

    # Resource
    "NotFoundException",
    "EmployeeNotFoundException",
    "CompanyNotFoundException",
    "TransactionNotFoundException",
    "ConflictException",
    "DuplicateEntryException",

    # External / dependency
    "ExternalServiceException",
    "OpenAIAPIException",
    "DependencyFailureException",

    # Handlers
    "setup_exception_handlers",
    "create_error_response",

    # Utilities
    "validate_amount",
]
