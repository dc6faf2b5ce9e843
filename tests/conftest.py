"""Shared fixtures for supload tests."""

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from supload.models import Session


def build_response(status_code=200, headers=None, body=b"", reason="OK"):
    """Build a requests.Response as the storage endpoint would return it."""
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response.headers = CaseInsensitiveDict(headers or {})
    response._content = body
    response._content_consumed = True
    response.encoding = "utf-8"
    return response


@pytest.fixture
def make_response():
    """Factory for fake HTTP responses."""
    return build_response


@pytest.fixture
def session():
    """Authenticated storage session."""
    return Session(storage_url="https://storage.example.com/v1/SEL_1", auth_token="tok-123")
