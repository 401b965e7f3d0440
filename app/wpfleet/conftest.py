import json

import pytest
import requests


class FakeResponse:
    def __init__(self, payload=None, status_code=200, headers=None):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}
        self.text = json.dumps(payload) if payload is not None else ""

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error", response=self)


class FakeSession:
    """Records calls and answers from a queue or a (method, url-suffix) map."""

    def __init__(self, routes=None, queue=None):
        self.routes = routes or {}
        self.queue = list(queue or [])
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if self.queue:
            answer = self.queue.pop(0)
        else:
            answer = None
            for (route_method, suffix), value in self.routes.items():
                if route_method == method and url.endswith(suffix):
                    answer = value
                    break
            if answer is None:
                raise AssertionError(f"Unexpected request {method} {url}")
        if isinstance(answer, Exception):
            raise answer
        if isinstance(answer, FakeResponse):
            return answer
        return FakeResponse(answer)

    def get(self, url, **kwargs):
        return self.request("GET", url, **kwargs)


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
