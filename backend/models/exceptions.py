"""
Custom domain exceptions for the application.

These exceptions are raised by the service layer and converted to HTTP responses
by centralized exception handlers in main.py, maintaining proper separation of concerns.

The authentication module (auth.py) also uses these domain exceptions to remain
HTTP-agnostic, allowing reuse in non-HTTP contexts (CLI tools, maintenance scripts).

Every exception carries a stable ``code`` string so clients can branch on the
failure without parsing messages, plus a correlation ID for error tracking.
"""

from core.correlation import generate_correlation_id, get_correlation_id


class DomainException(Exception):
    """
    Base class for all domain exceptions.

    Attributes:
        message: Human-readable error message.
        code: Stable machine-readable error code.
        correlation_id: Unique ID for error tracking (auto-generated if not provided).
    """

    default_code = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        correlation_id: str | None = None,
    ):
        self.message = message
        self.code = code or self.default_code
        # Use request correlation ID if available, otherwise generate new one
        self.correlation_id = (
            correlation_id or get_correlation_id() or generate_correlation_id()
        )
        super().__init__(self.message)


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    default_code = "NOT_FOUND"


class PermissionDeniedException(DomainException):
    """Raised when user lacks required permissions."""

    default_code = "FORBIDDEN"


class ValidationException(DomainException):
    """Raised when input validation fails."""

    default_code = "VALIDATION_ERROR"


class ConflictException(DomainException):
    """Raised when operation conflicts with existing data."""

    default_code = "CONFLICT"


class AuthenticationException(DomainException):
    """Raised when authentication fails."""

    default_code = "INVALID_TOKEN"


# Specific exceptions for domain entities


class UserNotFoundException(NotFoundException):
    """User not found."""

    default_code = "USER_NOT_FOUND"


class DoubtNotFoundException(NotFoundException):
    """Doubt not found."""

    default_code = "DOUBT_NOT_FOUND"


class AnswerNotFoundException(NotFoundException):
    """Answer not found."""

    default_code = "ANSWER_NOT_FOUND"


class CommentNotFoundException(NotFoundException):
    """Comment not found."""

    default_code = "COMMENT_NOT_FOUND"


class ParentCommentNotFoundException(NotFoundException):
    """Parent comment of a reply not found."""

    default_code = "PARENT_COMMENT_NOT_FOUND"


class JuniorPostNotFoundException(NotFoundException):
    """Junior space post not found."""

    default_code = "POST_NOT_FOUND"


class MentorProfileNotFoundException(NotFoundException):
    """Mentor profile not found."""

    default_code = "PROFILE_NOT_FOUND"


class UpvoteNotFoundException(NotFoundException):
    """Upvote not found for the (user, answer) pair."""

    default_code = "UPVOTE_NOT_FOUND"


# Authentication


class InvalidCredentialsException(AuthenticationException):
    """Invalid email or password."""

    default_code = "INVALID_CREDENTIALS"

    def __init__(self, message: str = "Invalid email or password"):
        super().__init__(message)


class InvalidPasswordException(AuthenticationException):
    """Current password supplied for a password change is wrong."""

    default_code = "INVALID_PASSWORD"

    def __init__(self, message: str = "Current password is incorrect"):
        super().__init__(message)


# Authorization


class ForbiddenException(PermissionDeniedException):
    """Authenticated, but not the owner of the resource."""

    default_code = "FORBIDDEN"


class UnauthorizedRoleException(PermissionDeniedException):
    """The actor's role does not allow the operation."""

    default_code = "UNAUTHORIZED"


class MentorNotApprovedException(PermissionDeniedException):
    """A mentor tried to answer before being approved by an admin."""

    default_code = "NOT_APPROVED"

    def __init__(self, message: str = "Your mentor account is not approved yet"):
        super().__init__(message)


class InvalidSecretKeyException(PermissionDeniedException):
    """Registration secret for a privileged role did not match."""

    default_code = "INVALID_SECRET_KEY"


class UserBannedException(PermissionDeniedException):
    """Raised when a banned user attempts an authenticated action."""

    default_code = "USER_BANNED"

    def __init__(self, message: str = "Your account has been banned"):
        super().__init__(message)


# Validation


class InvalidRoleException(ValidationException):
    """Role outside the allowed set for the operation."""

    default_code = "INVALID_ROLE"


# Conflicts


class EmailAlreadyExistsException(ConflictException):
    """Email is already registered."""

    default_code = "EMAIL_EXISTS"

    def __init__(self, message: str = "Email already registered"):
        super().__init__(message)


class AlreadyUpvotedException(ConflictException):
    """User has already upvoted this answer."""

    default_code = "ALREADY_UPVOTED"

    def __init__(self, message: str = "User has already upvoted this answer"):
        super().__init__(message)


class MentorProfileExistsException(ConflictException):
    """A mentor profile already exists for this user."""

    default_code = "PROFILE_EXISTS"

    def __init__(self, message: str = "Mentor profile already exists for this user"):
        super().__init__(message)
