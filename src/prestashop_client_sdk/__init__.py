from .config import ClientConfig, ConfigError, load_config
from .diagnostics import DebugDump, get_logger
from .entities import Entity, Product
from .error_mapper import STATUS_REASONS, check_status_code
from .exceptions import (
    AttributeNotFoundError,
    BadParametersError,
    EmptyResponseError,
    HttpStatusError,
    IncompatibleVersionError,
    MalformedResponseError,
    TransportError,
    UnexpectedHttpStatusError,
    UnexpectedPayloadError,
    UnparsableXmlError,
    WebserviceError,
)
from .http_client import HttpClient
from .options import (
    OUTPUT_FORMAT_JSON,
    OUTPUT_FORMAT_XML,
    RequestOptions,
    ResourceTarget,
    UrlTarget,
)
from .response import ResponseEnvelope, parse_headers
from .versioning import MAX_COMPATIBLE_VERSION, MIN_COMPATIBLE_VERSION, compare_versions, is_compatible
from .webservice import Webservice

__version__ = "0.1.0"

__all__ = [
    "AttributeNotFoundError",
    "BadParametersError",
    "ClientConfig",
    "ConfigError",
    "DebugDump",
    "EmptyResponseError",
    "Entity",
    "HttpClient",
    "HttpStatusError",
    "IncompatibleVersionError",
    "MAX_COMPATIBLE_VERSION",
    "MIN_COMPATIBLE_VERSION",
    "MalformedResponseError",
    "OUTPUT_FORMAT_JSON",
    "OUTPUT_FORMAT_XML",
    "Product",
    "RequestOptions",
    "ResourceTarget",
    "ResponseEnvelope",
    "STATUS_REASONS",
    "TransportError",
    "UnexpectedHttpStatusError",
    "UnexpectedPayloadError",
    "UnparsableXmlError",
    "UrlTarget",
    "Webservice",
    "WebserviceError",
    "check_status_code",
    "compare_versions",
    "get_logger",
    "is_compatible",
    "load_config",
    "parse_headers",
]
