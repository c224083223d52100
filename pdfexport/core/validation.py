"""
Validation framework for PDF export.

Provides detailed validation with clear error messages and suggestions
for exporter configuration and export requests.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional
from urllib.parse import urlparse

from .domain import ExporterConfig, ExportRequest
from .exceptions import InvalidRequestError


SUPPORTED_URL_SCHEMES = {'http', 'https', 'file', 'data', 'about'}


@dataclass
class ValidationError:
    """One rejected field, with the offending value and how to fix it"""
    field: str
    value: Any
    message: str
    suggestion: Optional[str] = None
    code: Optional[str] = None

    def __str__(self) -> str:
        result = f"{self.field} {self.message}"
        if self.suggestion:
            result += f" ({self.suggestion})"
        return result


@dataclass
class ValidationResult:
    """Outcome of checking one exporter configuration or export request"""
    subject: str
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def fields(self) -> List[str]:
        return [error.field for error in self.errors]

    def get_error_summary(self) -> str:
        """One line naming every rejected field, suitable for an exception message"""
        if not self.errors:
            return f"{self.subject} is valid"
        return f"Invalid {self.subject}: " + "; ".join(str(error) for error in self.errors)


class ConfigurationValidator:
    """Validates exporter configuration with detailed error reporting"""

    def validate(self, config: ExporterConfig) -> ValidationResult:
        result = ValidationResult("exporter configuration")
        errors, warnings = result.errors, result.warnings

        if not config.host:
            errors.append(ValidationError(
                field="host",
                value=config.host,
                message="is required",
                suggestion="Set PDF_EXPORT_HOST (usually localhost)",
                code="MISSING_HOST"
            ))

        if not isinstance(config.port, int) or not 1 <= config.port <= 65535:
            errors.append(ValidationError(
                field="port",
                value=config.port,
                message="must be an integer between 1 and 65535",
                suggestion="Use a free local port such as 9222",
                code="INVALID_PORT"
            ))

        for name in ('timeout_ms', 'startup_timeout_ms', 'poll_interval_ms', 'request_timeout_ms',
                     'navigation_timeout_ms', 'capture_timeout_ms'):
            value = getattr(config, name)
            if not isinstance(value, (int, float)) or value <= 0:
                errors.append(ValidationError(
                    field=name,
                    value=value,
                    message="must be a positive number of milliseconds",
                    code="INVALID_DURATION"
                ))

        if not errors and config.poll_interval_ms >= config.startup_timeout_ms:
            warnings.append("poll_interval_ms is not shorter than startup_timeout_ms; "
                            "only one readiness check will run")

        for option in config.chrome_bin_options:
            if not isinstance(option, str):
                errors.append(ValidationError(
                    field="chrome_bin_options",
                    value=option,
                    message="every launch option must be a string",
                    code="INVALID_OPTION"
                ))
            elif option.startswith('--remote-debugging-port'):
                warnings.append("chrome_bin_options overrides --remote-debugging-port; "
                                "the readiness check still uses the configured port")

        return result


class RequestValidator:
    """Validates export requests before any browser resource is touched"""

    def validate(self, request: ExportRequest) -> ValidationResult:
        result = ValidationResult("export request")
        errors, warnings = result.errors, result.warnings

        parsed = urlparse(request.url)
        if parsed.scheme.lower() not in SUPPORTED_URL_SCHEMES:
            errors.append(ValidationError(
                field="url",
                value=request.url,
                message=f"unsupported scheme '{parsed.scheme}'",
                suggestion="Use an absolute http(s):// or file:// URL",
                code="INVALID_URL"
            ))
        elif parsed.scheme.lower() in ('http', 'https') and not parsed.netloc:
            errors.append(ValidationError(
                field="url",
                value=request.url,
                message="is missing a host",
                code="INVALID_URL"
            ))

        for index, cookie in enumerate(request.cookies):
            if not isinstance(cookie, dict):
                errors.append(ValidationError(
                    field=f"cookies[{index}]",
                    value=cookie,
                    message="must be a mapping of cookie attributes",
                    code="INVALID_COOKIE"
                ))
                continue
            if not cookie.get('name') or 'value' not in cookie:
                errors.append(ValidationError(
                    field=f"cookies[{index}]",
                    value=cookie,
                    message="needs both 'name' and 'value'",
                    code="INVALID_COOKIE"
                ))
            if not cookie.get('url') and not cookie.get('domain'):
                errors.append(ValidationError(
                    field=f"cookies[{index}]",
                    value=cookie,
                    message="needs a 'url' or 'domain' to scope it",
                    suggestion="Add domain='example.com' or url=request.url",
                    code="UNSCOPED_COOKIE"
                ))

        if not isinstance(request.pdf_options, dict):
            errors.append(ValidationError(
                field="pdf_options",
                value=request.pdf_options,
                message="must be a mapping of Page.printToPDF parameters",
                code="INVALID_PDF_OPTIONS"
            ))

        return result

    def ensure_valid(self, request: ExportRequest) -> ExportRequest:
        """Validate and raise InvalidRequestError on the first problem"""
        result = self.validate(request)
        if not result.valid:
            first = result.errors[0]
            raise InvalidRequestError(result.get_error_summary(), field=first.field)
        return request
