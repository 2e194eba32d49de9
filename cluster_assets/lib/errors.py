"""Exceptions raised while building cluster assets."""

from pathlib import Path

from .roles import Role


class AssetsError(Exception):
    """Base class for asset pipeline failures.

    Carries the role, cache path and operation that failed so the caller can
    diagnose without re-running.
    """

    def __init__(
        self,
        message: str,
        *,
        role: Role | None = None,
        path: Path | None = None,
        operation: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.role = role
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        context = []
        if self.operation is not None:
            context.append(f"operation={self.operation}")
        if self.role is not None:
            context.append(f"role={self.role.value}")
        if self.path is not None:
            context.append(f"path={self.path}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"

    def log_context(self) -> dict[str, str]:
        """Return the known context as string fields for structured logging."""
        context = {}
        if self.operation is not None:
            context["operation"] = self.operation
        if self.role is not None:
            context["role"] = self.role.value
        if self.path is not None:
            context["path"] = str(self.path)
        return context


class GenerationError(AssetsError):
    """Raised when key-pair generation or certificate signing fails."""


class ParseError(AssetsError):
    """Raised when cached PEM or ciphertext is malformed or inconsistent."""


class EncryptionError(AssetsError):
    """Raised when the encryption capability fails."""


class AssetIOError(AssetsError):
    """Raised when a cache file cannot be read or written."""


class AssetNotFoundError(AssetIOError):
    """Raised when a cache entry is absent and creation is not allowed."""


class RandomSourceError(AssetsError):
    """Raised when the secure random source is unavailable."""
