"""
Backend Mock for Component Testing

Fakes the homestay backend (and the payment providers) behind an
httpx.MockTransport, recording every request it receives.
"""
import fnmatch
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx


@dataclass
class MockHttpResponse:
    """Canned backend answer; a fresh httpx.Response is built per request"""
    status_code: int = 200
    json_data: Any = None
    text: str = ""
    headers: Dict[str, str] = field(default_factory=dict)

    def build(self) -> httpx.Response:
        if self.json_data is not None:
            return httpx.Response(self.status_code, json=self.json_data, headers=self.headers)
        return httpx.Response(self.status_code, text=self.text, headers=self.headers)


class MockBackend:
    """
    Fake backend keyed by "METHOD:/path"

    Paths may use fnmatch wildcards. A key given several responses answers
    them in order and then repeats the last one.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._responses: Dict[str, List[MockHttpResponse]] = {}
        self._default_response = MockHttpResponse(200, {"success": True})
        self._should_raise: Optional[Exception] = None

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._should_raise:
            raise self._should_raise

        queue = self._find(request.method, request.url.path)
        if not queue:
            return self._default_response.build()
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        return response.build()

    def _find(self, method: str, path: str) -> Optional[List[MockHttpResponse]]:
        key = f"{method}:{path}"
        if key in self._responses:
            return self._responses[key]
        for pattern, queue in self._responses.items():
            method_pattern, path_pattern = pattern.split(":", 1)
            if method_pattern == method and fnmatch.fnmatch(path, path_pattern):
                return queue
        return None

    # Test helper methods

    def set_response(
        self,
        method: str,
        path: str,
        status_code: int = 200,
        json_data: Any = None,
        text: str = "",
        headers: Optional[Dict[str, str]] = None,
    ):
        """Set response for specific method and path"""
        self._responses[f"{method}:{path}"] = [
            MockHttpResponse(status_code, json_data, text, headers or {})
        ]

    def set_responses(self, method: str, path: str, *responses: MockHttpResponse):
        """Answer successive calls with successive responses"""
        self._responses[f"{method}:{path}"] = list(responses)

    def set_default_response(self, status_code: int = 200, json_data: Any = None):
        """Set default response for unmatched requests"""
        self._default_response = MockHttpResponse(status_code, json_data)

    def set_error(self, error: Exception):
        """Make every request raise"""
        self._should_raise = error

    def calls(self, method: Optional[str] = None, path: Optional[str] = None) -> List[httpx.Request]:
        """Requests received, optionally filtered by method and path"""
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.url.path == path)
        ]

    def last_request(self, method: Optional[str] = None, path: Optional[str] = None) -> httpx.Request:
        matching = self.calls(method, path)
        assert matching, f"no request to {method or '*'} {path or '*'}"
        return matching[-1]

    @staticmethod
    def json_body(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    def clear(self):
        """Clear request log"""
        self.requests.clear()
