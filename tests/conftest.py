"""Shared fixtures: HTML fixtures, a fake fetcher and a recording sleeper."""

from pathlib import Path
from typing import Dict, List, Tuple, Union
from unittest.mock import MagicMock

import pytest
import requests

from job_extractor.exceptions import FetchError, FetchErrorKind
from job_extractor.models import RawDocument

FIXTURES = Path(__file__).parent / "fixtures"


def load_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


class FakeFetcher:
    """Serves canned HTML by URL; unknown URLs fail like a 404."""

    def __init__(self, pages: Dict[str, Union[str, Exception]]):
        self.pages = pages
        self.calls: List[Tuple[str, bool]] = []

    def fetch(self, url: str, needs_dynamic_render: bool = False) -> RawDocument:
        self.calls.append((url, needs_dynamic_render))
        page = self.pages.get(url)
        if page is None:
            raise FetchError(url, FetchErrorKind.HTTP, 1, status=404)
        if isinstance(page, Exception):
            raise page
        return RawDocument(url=url, html=page, user_agent="test-agent")


class RecordingSleep:
    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def make_response(url: str, html: str = "", status: int = 200) -> MagicMock:
    resp = MagicMock(spec=requests.Response)
    resp.url = url
    resp.text = html
    resp.status_code = status
    return resp


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def generic_html():
    return load_fixture("generic_results.html")


@pytest.fixture
def detail_html():
    return load_fixture("generic_detail.html")
