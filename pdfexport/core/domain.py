"""
Core domain models for PDF export.

These models define the configuration, request and result value objects
used throughout the application, independent of any infrastructure concerns.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .exceptions import ExportFailedError, InvalidRequestError


DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 9222
DEFAULT_RENDER_TIMEOUT_MS = 3000
DEFAULT_STARTUP_TIMEOUT_MS = 30000
DEFAULT_POLL_INTERVAL_MS = 200
DEFAULT_REQUEST_TIMEOUT_MS = 10000
DEFAULT_NAVIGATION_TIMEOUT_MS = 30000
DEFAULT_CAPTURE_TIMEOUT_MS = 30000


@dataclass(frozen=True)
class ExporterConfig:
    """Immutable exporter configuration"""

    chrome_bin: Optional[str] = None            # Discovered when not set
    chrome_bin_options: Tuple[str, ...] = ()    # Extra launch arguments, in order
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    timeout_ms: int = DEFAULT_RENDER_TIMEOUT_MS
    startup_timeout_ms: int = DEFAULT_STARTUP_TIMEOUT_MS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS           # readiness check, connect, cleanup
    navigation_timeout_ms: int = DEFAULT_NAVIGATION_TIMEOUT_MS     # navigate + load event
    capture_timeout_ms: int = DEFAULT_CAPTURE_TIMEOUT_MS           # Page.printToPDF
    disable_extensions: bool = True
    ignore_certificate_errors: bool = True

    def __post_init__(self):
        options = self.chrome_bin_options
        if isinstance(options, str):
            # A lone string is one option, not a sequence of characters
            options = (options,)
        object.__setattr__(self, 'chrome_bin_options', tuple(options or ()))

    @property
    def endpoint(self) -> str:
        """HTTP endpoint of the browser's debugging interface"""
        return f"http://{self.host}:{self.port}"

    def build_launch_args(self) -> List[str]:
        """Command-line arguments passed to the browser binary"""
        args = [f"--remote-debugging-port={self.port}"]
        if self.disable_extensions:
            args.append('--disable-extensions')
        args.append('--headless')
        args.extend(self.chrome_bin_options)
        return args

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'ExporterConfig':
        """
        Build a config from a mapping.

        Accepts snake_case field names as well as the camelCase keys used by
        existing callers (chromeBin, chromeBinOptions, timeout).
        """
        aliases = {
            'chromeBin': 'chrome_bin',
            'chromeBinOptions': 'chrome_bin_options',
            'timeout': 'timeout_ms',
            'startupTimeout': 'startup_timeout_ms',
            'pollInterval': 'poll_interval_ms',
            'navigationTimeout': 'navigation_timeout_ms',
            'captureTimeout': 'capture_timeout_ms',
            'ignoreCertificateErrors': 'ignore_certificate_errors',
        }
        known = set(cls.__dataclass_fields__)
        values: Dict[str, Any] = {}
        for key, value in options.items():
            name = aliases.get(key, key)
            if name in known and value is not None:
                values[name] = value
        return cls(**values)


@dataclass
class ExportRequest:
    """A single page-to-PDF export request"""

    url: str
    cookies: List[Dict[str, Any]] = field(default_factory=list)      # Network.CookieParam dicts
    pdf_options: Dict[str, Any] = field(default_factory=dict)        # Page.printToPDF parameters

    def __post_init__(self):
        """Reject requests without a URL"""
        if not self.url or not isinstance(self.url, str):
            raise InvalidRequestError("url is required", field='url')
        if self.pdf_options is not None and not isinstance(self.pdf_options, Mapping):
            raise InvalidRequestError("pdf_options must be a mapping", field='pdf_options')
        self.cookies = list(self.cookies or [])
        self.pdf_options = dict(self.pdf_options or {})

    @classmethod
    def from_dict(cls, options: Mapping[str, Any]) -> 'ExportRequest':
        """Build a request from the {url, cookies, pdfOptions} mapping shape"""
        pdf_options = options.get('pdf_options', options.get('pdfOptions'))
        return cls(
            url=options.get('url'),
            cookies=options.get('cookies') or [],
            pdf_options=pdf_options or {},
        )


@dataclass
class BrowserProcess:
    """A running browser with its debugging endpoint"""

    handle: Any                 # asyncio.subprocess.Process or compatible
    binary: str
    args: List[str]
    endpoint: str
    started_at: datetime = field(default_factory=datetime.now)

    @property
    def pid(self) -> Optional[int]:
        return getattr(self.handle, 'pid', None)

    @property
    def is_alive(self) -> bool:
        return getattr(self.handle, 'returncode', None) is None


@dataclass(frozen=True)
class DebuggingTarget:
    """An isolated browsing context opened for one export call.

    ``context`` and ``page`` hold the client library's handles; they are
    opaque to the core and excluded from equality.
    """

    target_id: str
    context: Any = field(default=None, compare=False, repr=False)
    page: Any = field(default=None, compare=False, repr=False)


class RenderOutcome(Enum):
    """Which branch of the render-finished race settled first"""
    SIGNALLED = "signalled"     # page called its completion resolver
    TIMED_OUT = "timed_out"     # render timeout elapsed first


class ExportStatus(Enum):
    """Tagged outcome of an export call"""
    RENDERED = "rendered"
    RENDERED_AT_TIMEOUT = "rendered_at_timeout"
    FAILED = "failed"


@dataclass
class ExportResult:
    """Standardized export output"""

    status: ExportStatus
    url: str
    data: Optional[bytes] = None
    render_outcome: Optional[RenderOutcome] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    duration: float = 0.0
    finished_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def rendered(cls, url: str, data: bytes, outcome: RenderOutcome, duration: float = 0.0) -> 'ExportResult':
        status = ExportStatus.RENDERED if outcome is RenderOutcome.SIGNALLED else ExportStatus.RENDERED_AT_TIMEOUT
        return cls(status=status, url=url, data=data, render_outcome=outcome, duration=duration)

    @classmethod
    def failed(cls, url: str, error: BaseException, duration: float = 0.0,
               outcome: Optional[RenderOutcome] = None) -> 'ExportResult':
        return cls(
            status=ExportStatus.FAILED,
            url=url,
            render_outcome=outcome,
            error=str(error) or type(error).__name__,
            error_type=type(error).__name__,
            duration=duration,
        )

    @property
    def success(self) -> bool:
        """True when PDF bytes are available, whether or not the render timed out"""
        return self.status is not ExportStatus.FAILED and self.data is not None

    @property
    def timed_out(self) -> bool:
        return self.status is ExportStatus.RENDERED_AT_TIMEOUT

    @property
    def byte_count(self) -> int:
        return len(self.data) if self.data else 0

    def raise_for_status(self) -> 'ExportResult':
        """Raise ExportFailedError when the export failed, else return self"""
        if not self.success:
            raise ExportFailedError(
                f"Export of {self.url} failed: {self.error}",
                url=self.url,
                error_type=self.error_type,
            )
        return self
