"""
Core layer - Raw types and HTTP client.

This layer provides:
- Typed dataclasses matching the API bodies
- Low-level HTTP client with auth and error handling
- Settings resolution from the environment
"""

from doit_console.core.client import (
    DEFAULT_HOST_URL,
    APIClient,
    APIError,
    AuthenticationError,
    ConfigurationError,
    DecodeError,
    DoitError,
    TransportError,
)
from doit_console.core.config import Settings
from doit_console.core.types import (
    AdvancedAnalysis,
    Attribution,
    AttributionGroup,
    Component,
    ConfigFilter,
    Dimension,
    Group,
    Limit,
    Metric,
    MetricFilter,
    Origin,
    Report,
    ReportConfig,
    Split,
    SplitTarget,
    TimeSettings,
)

__all__ = [
    "DEFAULT_HOST_URL",
    "APIClient",
    "APIError",
    "AdvancedAnalysis",
    "Attribution",
    "AttributionGroup",
    "AuthenticationError",
    "Component",
    "ConfigFilter",
    "ConfigurationError",
    "DecodeError",
    "Dimension",
    "DoitError",
    "Group",
    "Limit",
    "Metric",
    "MetricFilter",
    "Origin",
    "Report",
    "ReportConfig",
    "Settings",
    "Split",
    "SplitTarget",
    "TimeSettings",
    "TransportError",
]
