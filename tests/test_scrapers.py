"""Tests for identity rotation and politeness delays."""

import random
from unittest.mock import PropertyMock, patch

import pytest

from job_extractor import config
from job_extractor.scrapers import base
from job_extractor.scrapers.base import IdentityPool, PolitenessDelay, browser_headers


class TestIdentityPool:
    def test_deduplicates_and_drops_blanks(self):
        pool = IdentityPool(["a", "b", "a", ""])
        assert list(pool) == ["a", "b"]
        assert len(pool) == 2

    def test_empty_pool_rejected(self):
        with pytest.raises(ValueError):
            IdentityPool([])

    def test_pick_is_from_pool(self):
        pool = IdentityPool(["a", "b", "c"])
        rng = random.Random(3)
        assert {pool.pick(rng) for _ in range(50)} <= {"a", "b", "c"}

    def test_build_extends_config_seeds(self):
        with patch.object(base, "UserAgent") as ua_cls:
            type(ua_cls.return_value).random = PropertyMock(
                side_effect=["sampled-0", "sampled-1", "sampled-2"])
            pool = base.build_identity_pool(size=len(config.USER_AGENTS) + 3)
        ua_cls.assert_called_once_with(platforms="desktop")
        agents = list(pool)
        assert agents[:len(config.USER_AGENTS)] == config.USER_AGENTS
        assert agents[len(config.USER_AGENTS):] == ["sampled-0", "sampled-1", "sampled-2"]

    def test_headers_carry_user_agent(self):
        headers = browser_headers("agent-x")
        assert headers["User-Agent"] == "agent-x"
        assert "text/html" in headers["Accept"]


class TestPolitenessDelay:
    def test_delay_within_bounds(self):
        slept = []
        delay = PolitenessDelay(base=1.5, jitter=2.0, sleep=slept.append, rng=random.Random(0))
        for _ in range(20):
            delay.wait()
        assert len(slept) == 20
        assert all(1.5 <= s <= 3.5 for s in slept)

    def test_zero_delay_does_not_sleep(self):
        slept = []
        PolitenessDelay(base=0, jitter=0, sleep=slept.append).wait()
        assert slept == []

    def test_defaults_from_config(self):
        delay = PolitenessDelay()
        assert delay.base == config.REQUEST_DELAY_MIN
        assert delay.jitter == config.REQUEST_DELAY_JITTER
