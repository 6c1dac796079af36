"""
Core Module for the Homestay Gateway

Shared building blocks used by every route service.

COMPONENTS:
    - config/: Environment-driven gateway configuration
    - backend_client.py: httpx client for the homestay backend (API_BASE_URL)
    - session_manager.py: Signed session cookie and access-token expiry
    - errors.py: Gateway error types rendered as JSON responses
    - relay.py: Relaying backend status and body to the browser
    - forms.py: Multipart bodies re-sent to the backend
    - validation.py: pydantic error shaping
    - auth_dependencies.py: Authorization header dependencies

USAGE:
    from core.backend_client import BackendClient
    from core.config import get_settings
"""

__version__ = "1.0.0"
