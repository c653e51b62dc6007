"""
DoiT Console client - Three-layer architecture for the analytics API.

Layers:
- core: Raw types, settings and HTTP client
- sdk: High-level DoitClient with one operations object per resource kind
- cli: Command-line interface
"""

from doit_console.sdk import DoitClient

__version__ = "0.1.0"
__all__ = ["DoitClient"]
