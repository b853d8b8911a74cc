from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    status_code: int = 500

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class ValidationError(AppError):
    status_code = 400


class AuthenticationError(AppError):
    status_code = 401


class AuthorizationError(AppError):
    status_code = 403


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class UpstreamDependencyError(AppError):
    """The attachment pipeline (or another external collaborator) failed."""

    status_code = 500


class TransientIOError(AppError):
    """The datastore is unavailable. Not retried here; callers decide."""

    status_code = 500
