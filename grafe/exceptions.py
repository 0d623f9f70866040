"""Central application exception hierarchy.

This module defines the base application exception ``AppError`` and the
specialized subclasses raised by the site build pipeline: template
configuration problems, front-matter validation failures and failures of the
external engines (markdown conversion, template rendering, script
transpilation). Every build stage raises one of these (or a built-in
``OSError`` for filesystem failures) and nothing is retried; the first error
stops the build.
"""

from __future__ import annotations

from typing import Any, Mapping


class AppError(Exception):
    """Base exception for all application-level errors.

    Parameters
    ----------
    code : str
        Machine-readable error code (e.g., ``'FRONT_MATTER_ERROR'``).
    message : str
        Human-readable message describing the error.
    context : Mapping[str, Any] | None, optional
        Optional structured context for logging (file paths, field names).
    transient : bool, optional
        Whether the error is temporary and may be retried.

    Attributes
    ----------
    code : str
        Stable machine-readable error code.
    message : str
        Human-readable message.
    context : dict
        Structured, non-sensitive context for logging.
    transient : bool
        True if the error is transient.

    Examples
    --------
    >>> e = AppError('CODE', 'message', context={'k': 'v'})
    >>> e.code
    'CODE'
    >>> str(e)
    'CODE: message'
    """

    __slots__ = ("code", "message", "context", "transient")

    def __init__(
        self,
        code: str,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context or {})
        self.transient = bool(transient)

    def __str__(self) -> str:
        """Return a compact string representation of the error."""
        return f"{self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Return a log-safe dictionary representation of the error."""
        return {
            "error_code": self.code,
            "message": self.message,
            "context": self.context,
            "is_transient": self.transient,
        }


class ConfigurationError(AppError):
    """Raised for invalid or missing site configuration."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        code: str = "CONFIGURATION_ERROR",
    ) -> None:
        super().__init__(code, message, context=context, transient=False)


class TemplateLoadError(ConfigurationError):
    """Raised when a layout or include cannot be parsed."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="TEMPLATE_LOAD_ERROR")


class TemplateNotFoundError(ConfigurationError):
    """Raised when a page names a template that is not in the registry."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="TEMPLATE_NOT_FOUND_ERROR")


class DataValidationError(AppError):
    """Raised for data that fails schema or content validation."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        code: str = "DATA_VALIDATION_ERROR",
    ) -> None:
        super().__init__(code, message, context=context, transient=False)


class FrontMatterError(DataValidationError):
    """Raised when a content file's front matter is malformed or incomplete."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="FRONT_MATTER_ERROR")


class TemplateRenderError(DataValidationError):
    """Raised when binding page data to a template fails at render time."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="TEMPLATE_RENDER_ERROR")


class ExternalServiceError(AppError):
    """Raised for unexpected failures from an external engine."""

    def __init__(
        self,
        message: str,
        *,
        context: Mapping[str, Any] | None = None,
        transient: bool = False,
        code: str = "EXTERNAL_SERVICE_ERROR",
    ) -> None:
        super().__init__(code, message, context=context, transient=transient)


class ConversionError(ExternalServiceError):
    """Raised when the markdown engine fails to convert a content file."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="CONVERSION_ERROR")


class TranspileError(ExternalServiceError):
    """Raised when the script transpiler is missing, fails, or times out."""

    def __init__(
        self, message: str, *, context: Mapping[str, Any] | None = None
    ) -> None:
        super().__init__(message, context=context, code="TRANSPILE_ERROR")
