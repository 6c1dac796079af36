"""
Component Test Mocks

Shared mock implementations for component testing.
These mocks replace real I/O dependencies (the backend and payment providers).
"""

from .http_mock import MockBackend, MockHttpResponse

__all__ = [
    'MockBackend',
    'MockHttpResponse',
]
