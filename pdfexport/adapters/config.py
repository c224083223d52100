"""
Configuration adapters for the PDF exporter.

These adapters turn environment variables or plain mappings into a
validated ExporterConfig.
"""

import os
import shlex
from typing import Any, Dict, Mapping, Optional

from dotenv import load_dotenv

from ..core.domain import (
    DEFAULT_CAPTURE_TIMEOUT_MS, DEFAULT_HOST, DEFAULT_NAVIGATION_TIMEOUT_MS, DEFAULT_PORT, DEFAULT_RENDER_TIMEOUT_MS,
    DEFAULT_STARTUP_TIMEOUT_MS, ExporterConfig,
)
from ..core.exceptions import InvalidConfigurationError
from ..core.validation import ConfigurationValidator

# Load environment variables
load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class EnvironmentConfigAdapter:
    """Configuration adapter that reads from environment variables with validation"""

    def __init__(self, validate_on_access: bool = True, environ: Optional[Mapping[str, str]] = None):
        self.validator = ConfigurationValidator()
        self.validate_on_access = validate_on_access
        self.environ = environ if environ is not None else os.environ

    def get_browser_config(self) -> Dict[str, Any]:
        """Get browser launch settings from environment"""
        return {
            'chrome_bin': self.environ.get('PDF_EXPORT_CHROME_BIN') or None,
            'chrome_bin_options': tuple(shlex.split(self.environ.get('PDF_EXPORT_CHROME_OPTIONS', ''))),
            'host': self.environ.get('PDF_EXPORT_HOST', DEFAULT_HOST),
            'port': int(self.environ.get('PDF_EXPORT_PORT', DEFAULT_PORT)),
            'ignore_certificate_errors': _as_bool(self.environ.get('PDF_EXPORT_IGNORE_CERT_ERRORS', 'true')),
        }

    def get_timeout_config(self) -> Dict[str, int]:
        """Get timeouts (milliseconds) from environment"""
        return {
            'timeout_ms': int(self.environ.get('PDF_EXPORT_TIMEOUT_MS', DEFAULT_RENDER_TIMEOUT_MS)),
            'startup_timeout_ms': int(self.environ.get('PDF_EXPORT_STARTUP_TIMEOUT_MS', DEFAULT_STARTUP_TIMEOUT_MS)),
            'navigation_timeout_ms': int(self.environ.get('PDF_EXPORT_NAVIGATION_TIMEOUT_MS',
                                                          DEFAULT_NAVIGATION_TIMEOUT_MS)),
            'capture_timeout_ms': int(self.environ.get('PDF_EXPORT_CAPTURE_TIMEOUT_MS', DEFAULT_CAPTURE_TIMEOUT_MS)),
        }

    def get_exporter_config(self) -> ExporterConfig:
        """
        Build the exporter configuration.

        Raises:
            InvalidConfigurationError: If validation is enabled and fails
            ValueError: If a numeric variable cannot be parsed
        """
        config = ExporterConfig(**self.get_browser_config(), **self.get_timeout_config())
        if self.validate_on_access:
            result = self.validator.validate(config)
            if not result.valid:
                raise InvalidConfigurationError(result)
        return config


class DictConfigAdapter:
    """Configuration adapter for an options mapping such as {chromeBin, port, timeout}"""

    def __init__(self, options: Mapping[str, Any], validate_on_access: bool = True):
        self.options = dict(options)
        self.validator = ConfigurationValidator()
        self.validate_on_access = validate_on_access

    def get_exporter_config(self) -> ExporterConfig:
        config = ExporterConfig.from_dict(self.options)
        if self.validate_on_access:
            result = self.validator.validate(config)
            if not result.valid:
                raise InvalidConfigurationError(result)
        return config
