"""
Python client for the clinic portal.

``DataAccessLayer.from_settings()`` wires the API client, the auth session,
the demo-mode controller and the local services over one storage backend.
"""

from .auth_session import AuthResult, AuthSession
from .data_access import DataAccessLayer, DataResult, DataSource
from .demo_mode import DemoModeController, DemoState
from .errors import DataAccessError, ErrorKind

__all__ = [
    "AuthResult",
    "AuthSession",
    "DataAccessError",
    "DataAccessLayer",
    "DataResult",
    "DataSource",
    "DemoModeController",
    "DemoState",
    "ErrorKind",
]
