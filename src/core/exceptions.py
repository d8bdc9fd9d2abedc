"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    NOT_A_MEMBER = "NOT_A_MEMBER"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"

    # Not found errors (404)
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    ARTICLE_NOT_FOUND = "ARTICLE_NOT_FOUND"
    COMMENT_NOT_FOUND = "COMMENT_NOT_FOUND"
    BRIEF_NOT_FOUND = "BRIEF_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ROLE = "INVALID_ROLE"

    # Invitation errors
    INVITATION_NOT_FOUND = "INVITATION_NOT_FOUND"
    INVITATION_EXPIRED = "INVITATION_EXPIRED"
    INVITATION_ALREADY_ACCEPTED = "INVITATION_ALREADY_ACCEPTED"
    DUPLICATE_INVITATION = "DUPLICATE_INVITATION"
    INVITATION_EMAIL_MISMATCH = "INVITATION_EMAIL_MISMATCH"

    # Conflict errors (409)
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"

    # Quota / rate limiting (429)
    QUOTA_EXCEEDED = "QUOTA_EXCEEDED"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    TRANSIENT_STORE_ERROR = "TRANSIENT_STORE_ERROR"
    GENERATION_FAILED = "GENERATION_FAILED"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class ValidationError(AppException):
    """Malformed input that passed transport validation (bad email, empty title...)."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class ProjectNotFoundError(AppException):
    """Project not found."""

    def __init__(self, project_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROJECT_NOT_FOUND,
            message=f"Project not found: {project_id}",
            status_code=404,
            details={"project_id": project_id},
        )


class NotAMemberError(AppException):
    """User has no active membership in the project."""

    def __init__(self, project_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.NOT_A_MEMBER,
            message="You are not a member of this project",
            status_code=403,
            details={"project_id": project_id},
        )


class InsufficientPermissionsError(AppException):
    """User does not have sufficient permissions."""

    def __init__(self, required_role: str = "admin", message: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=message or f"Insufficient permissions. Required role: {required_role}",
            status_code=403,
            details={"required_role": required_role},
        )


class MemberNotFoundError(AppException):
    """Target user has no active membership in the project."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message="User is not an active member of this project",
            status_code=404,
            details={"user_id": user_id},
        )


class ProfileNotFoundError(AppException):
    """User profile not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class ArticleNotFoundError(AppException):
    """Article not found."""

    def __init__(self, article_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ARTICLE_NOT_FOUND,
            message=f"Article not found: {article_id}",
            status_code=404,
            details={"article_id": article_id},
        )


class CommentNotFoundError(AppException):
    """Comment not found."""

    def __init__(self, comment_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.COMMENT_NOT_FOUND,
            message=f"Comment not found: {comment_id}",
            status_code=404,
            details={"comment_id": comment_id},
        )


class BriefNotFoundError(AppException):
    """Content brief not found, or owned by someone else."""

    def __init__(self, brief_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.BRIEF_NOT_FOUND,
            message=f"Content brief not found: {brief_id}",
            status_code=404,
            details={"brief_id": brief_id},
        )


class AlreadyAMemberError(AppException):
    """User is already an active member of the project."""

    def __init__(self, user_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message="User is already a member of this project",
            status_code=409,
            details={"user_id": user_id},
        )


class InvitationNotFoundError(AppException):
    """Invitation not found."""

    def __init__(self, invitation_id: str = "") -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_NOT_FOUND,
            message="Invitation not found",
            status_code=404,
            details={"invitation_id": invitation_id} if invitation_id else None,
        )


class InvitationExpiredError(AppException):
    """Invitation has expired."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EXPIRED,
            message="This invitation has expired",
            status_code=400,
        )


class InvitationAlreadyAcceptedError(AppException):
    """Invitation has already been accepted."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_ALREADY_ACCEPTED,
            message="This invitation has already been accepted",
            status_code=400,
        )


class DuplicateInvitationError(AppException):
    """A pending invitation already exists for this email and project."""

    def __init__(self, email: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_INVITATION,
            message="A pending invitation already exists for this email",
            status_code=409,
            details={"email": email},
        )


class InvitationEmailMismatchError(AppException):
    """The user's email does not match the invitation email."""

    def __init__(self) -> None:
        super().__init__(
            error_code=ErrorCode.INVITATION_EMAIL_MISMATCH,
            message="This invitation is not for your email address",
            status_code=403,
        )


class QuotaExceededError(AppException):
    """Monthly AI generation allowance is used up."""

    def __init__(self, usage_count: int, usage_limit: int) -> None:
        super().__init__(
            error_code=ErrorCode.QUOTA_EXCEEDED,
            message="Monthly AI generation limit reached",
            status_code=429,
            details={"usage_count": usage_count, "usage_limit": usage_limit},
        )


class TransientStoreError(AppException):
    """The store timed out or was unreachable. The outcome of a write is unknown."""

    def __init__(self, message: str = "The data store is temporarily unavailable") -> None:
        super().__init__(
            error_code=ErrorCode.TRANSIENT_STORE_ERROR,
            message=message,
            status_code=503,
        )


class GenerationFailedError(AppException):
    """The content generator failed or returned output that could not be used."""

    def __init__(self, message: str = "Content generation failed") -> None:
        super().__init__(
            error_code=ErrorCode.GENERATION_FAILED,
            message=message,
            status_code=502,
        )
