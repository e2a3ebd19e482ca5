# File: sierrha/__init__.py
"""
Sierrha package initializer.
Defines package version and exposes the error handler API.
"""
__version__ = "0.1.0"

from sierrha.handler import ErrorHandler, build_handler, create_handler  # noqa: E402
from sierrha.models import ErrorResponse, RequestContext  # noqa: E402

__all__ = ["__version__", "ErrorHandler", "build_handler", "create_handler", "ErrorResponse", "RequestContext"]
