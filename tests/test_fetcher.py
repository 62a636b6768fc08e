"""Tests for the Fetcher retry policy, identity rotation and rendering path."""

import random
import threading
from unittest.mock import MagicMock, patch

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError

from job_extractor.exceptions import FetchError, FetchErrorKind
from job_extractor.scrapers.base import IdentityPool
from job_extractor.scrapers.fetcher import Fetcher

from tests.conftest import make_response

URL = "https://jobs.example.com/search?q=python"
AGENTS = IdentityPool(["agent-a", "agent-b", "agent-c"])
SESSION_SPEC = requests.Session


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


def _fetcher(session, sleeper, **kwargs):
    kwargs.setdefault("max_retries", 3)
    kwargs.setdefault("backoff_base", 1.0)
    return Fetcher(session=session, identities=AGENTS, sleep=sleeper,
                   rng=random.Random(7), **kwargs)


class TestStaticFetch:
    def test_success(self, session, sleeper):
        session.get.return_value = make_response(URL, "<html>ok</html>")
        doc = _fetcher(session, sleeper).fetch(URL)
        assert doc.html == "<html>ok</html>"
        assert doc.status == 200
        assert not doc.rendered
        assert doc.user_agent in set(AGENTS)
        assert sleeper.calls == []

    def test_sends_user_agent_from_pool(self, session, sleeper):
        session.get.return_value = make_response(URL)
        doc = _fetcher(session, sleeper).fetch(URL)
        headers = session.get.call_args.kwargs["headers"]
        assert headers["User-Agent"] == doc.user_agent

    def test_timeouts_then_success_backs_off_exponentially(self, session, sleeper):
        session.get.side_effect = [
            requests.Timeout("slow"),
            requests.Timeout("slow"),
            make_response(URL, "<html>late</html>"),
        ]
        doc = _fetcher(session, sleeper).fetch(URL)
        assert doc.html == "<html>late</html>"
        assert sleeper.calls == [1.0, 2.0]
        assert session.get.call_count == 3

    def test_retries_exhausted(self, session, sleeper):
        session.get.side_effect = requests.ConnectionError("refused")
        with pytest.raises(FetchError) as info:
            _fetcher(session, sleeper).fetch(URL)
        assert info.value.kind is FetchErrorKind.NETWORK
        assert info.value.attempts == 3
        assert info.value.url == URL
        assert session.get.call_count == 3
        # no sleep after the final attempt
        assert sleeper.calls == [1.0, 2.0]

    def test_retryable_status(self, session, sleeper):
        session.get.side_effect = [make_response(URL, status=503), make_response(URL, "ok")]
        doc = _fetcher(session, sleeper).fetch(URL)
        assert doc.html == "ok"
        assert sleeper.calls == [1.0]

    def test_retryable_status_exhausted_keeps_status(self, session, sleeper):
        session.get.return_value = make_response(URL, status=429)
        with pytest.raises(FetchError) as info:
            _fetcher(session, sleeper, max_retries=2).fetch(URL)
        assert info.value.status == 429
        assert info.value.attempts == 2

    def test_not_found_is_not_retried(self, session, sleeper):
        session.get.return_value = make_response(URL, status=404)
        with pytest.raises(FetchError) as info:
            _fetcher(session, sleeper).fetch(URL)
        assert info.value.kind is FetchErrorKind.HTTP
        assert info.value.status == 404
        assert info.value.attempts == 1
        assert session.get.call_count == 1
        assert sleeper.calls == []

    def test_fatal_after_transient_reports_attempt(self, session, sleeper):
        session.get.side_effect = [requests.Timeout("slow"), make_response(URL, status=403)]
        with pytest.raises(FetchError) as info:
            _fetcher(session, sleeper).fetch(URL)
        assert info.value.attempts == 2
        assert info.value.kind is FetchErrorKind.HTTP

    def test_invalid_url_error_is_not_retried(self, session, sleeper):
        session.get.side_effect = requests.exceptions.InvalidURL("bad")
        with pytest.raises(FetchError) as info:
            _fetcher(session, sleeper).fetch(URL)
        assert info.value.kind is FetchErrorKind.NETWORK
        assert session.get.call_count == 1

    def test_backoff_delay(self, session, sleeper):
        fetcher = _fetcher(session, sleeper, backoff_base=0.5)
        assert [fetcher.backoff_delay(n) for n in (1, 2, 3)] == [0.5, 1.0, 2.0]


class TestRenderedFetch:
    def test_uses_renderer(self, session, sleeper):
        renderer = MagicMock(return_value="<html>rendered</html>")
        doc = _fetcher(session, sleeper, renderer=renderer).fetch(URL, needs_dynamic_render=True)
        assert doc.rendered
        assert doc.html == "<html>rendered</html>"
        renderer.assert_called_once_with(URL, doc.user_agent)
        session.get.assert_not_called()

    def test_browser_failures_exhaust_retries(self, session, sleeper):
        renderer = MagicMock(side_effect=PlaywrightError("Target closed"))
        with pytest.raises(FetchError) as info:
            _fetcher(session, sleeper, renderer=renderer).fetch(URL, needs_dynamic_render=True)
        assert info.value.kind is FetchErrorKind.BROWSER
        assert info.value.attempts == 3
        assert renderer.call_count == 3
        assert sleeper.calls == [1.0, 2.0]


class TestSessions:
    def _session_factory(self):
        def new_session():
            session = MagicMock(spec=SESSION_SPEC)
            session.get.return_value = make_response(URL, "<html>ok</html>")
            return session
        return new_session

    def test_one_session_per_thread(self, sleeper):
        fetcher = Fetcher(identities=AGENTS, sleep=sleeper)
        with patch.object(requests, "Session", side_effect=self._session_factory()) as session_cls:
            fetcher.fetch(URL)
            fetcher.fetch(URL)
            assert session_cls.call_count == 1

            workers = [threading.Thread(target=fetcher.fetch, args=(URL,)) for _ in range(2)]
            for w in workers:
                w.start()
            for w in workers:
                w.join()
            assert session_cls.call_count == 3

    def test_injected_session_is_shared(self, session, sleeper):
        session.get.return_value = make_response(URL)
        fetcher = _fetcher(session, sleeper)
        assert fetcher.session is session
        worker = threading.Thread(target=fetcher.fetch, args=(URL,))
        worker.start()
        worker.join()
        assert session.get.call_count == 1
