"""Tests for the normalizer helpers."""

import re

import pytest

from job_extractor.engine.normalizer import (
    categorize_experience,
    clean_text,
    extract_years,
    normalize_experience,
    normalize_url,
    parse_salary_range,
)


class TestCleanText:
    @pytest.mark.parametrize("raw", [
        "<b>Senior</b>   Python\tDeveloper",
        "Data&nbsp;&nbsp;Engineer <span class='x'>(Remote)</span>",
        "  Backend\n\n Engineer  ",
        "<p>Title with &lt;script&gt;alert(1)&lt;/script&gt; inside</p>",
        "<div><p>ML</p><p>Engineer</p></div>",
    ])
    def test_no_tags_and_single_spaces(self, raw):
        out = clean_text(raw)
        assert out
        assert not re.search(r"<[^>]*>", out)
        assert not re.search(r"\s{2,}", out)
        assert out == out.strip()

    def test_collapses_non_breaking_spaces(self):
        assert clean_text("Berlin,\u00a0\u00a0Germany") == "Berlin, Germany"

    def test_strips_boilerplate(self):
        assert clean_text("Build pipelines. Show more Show less") == "Build pipelines."
        assert clean_text("Great team Show more") == "Great team"

    def test_empty_and_none(self):
        assert clean_text("") == ""
        assert clean_text(None) == ""
        assert clean_text("     ") == ""


class TestNormalizeUrl:
    def test_root_relative(self):
        assert normalize_url("/jobs/123", "https://example.com/search") == "https://example.com/jobs/123"

    def test_absolute_passes_through(self):
        url = "https://other.example.org/job/9?ref=x"
        assert normalize_url(url, "https://example.com/search") == url

    def test_protocol_relative_gets_base_scheme(self):
        assert normalize_url("//cdn.example.com/job/1", "http://example.com/") == "http://cdn.example.com/job/1"

    def test_plain_relative_inserts_single_separator(self):
        assert normalize_url("job/5", "https://example.com/careers") == "https://example.com/careers/job/5"
        assert normalize_url("job/5", "https://example.com/careers/") == "https://example.com/careers/job/5"

    def test_relative_drops_base_query(self):
        assert normalize_url("job/5", "https://example.com/careers?page=2") == "https://example.com/careers/job/5"

    def test_query_only_resolves_against_base(self):
        assert normalize_url("?page=2", "https://example.com/jobs") == "https://example.com/jobs?page=2"

    def test_empty(self):
        assert normalize_url("", "https://example.com") == ""
        assert normalize_url(None, "https://example.com") == ""

    def test_malformed_degrades_to_concatenation(self):
        # unbalanced IPv6 bracket makes urlsplit raise
        assert normalize_url("jobs/1", "http://[::1/search") == "http://[::1/search/jobs/1"


class TestParseSalaryRange:
    def test_range_per_year(self):
        assert parse_salary_range("$80,000 - $100,000 per year") == "80,000 - 100,000 per year"

    def test_no_match_returns_original(self):
        assert parse_salary_range("Competitive") == "Competitive"

    def test_k_suffix(self):
        assert parse_salary_range("$120K - $150K a year") == "120,000 - 150,000 per year"

    def test_k_suffix_on_upper_bound_only(self):
        assert parse_salary_range("80-100k") == "80,000 - 100,000 per year"

    def test_single_number(self):
        assert parse_salary_range("From €45,000") == "45,000+ per year"

    def test_hourly_period(self):
        assert parse_salary_range("$50 - $60 an hour") == "50 - 60 per hour"
        assert parse_salary_range("£25/hr") == "25+ per hour"

    @pytest.mark.parametrize("raw,expected", [
        ("$25 - $30 hourly", "25 - 30 per hour"),
        ("$4,000 - $5,000 monthly", "4,000 - 5,000 per month"),
        ("$900 weekly", "900+ per week"),
        ("€200 - €250 daily", "200 - 250 per day"),
        ("$95,000 annually", "95,000+ per year"),
    ])
    def test_adverb_periods(self, raw, expected):
        assert parse_salary_range(raw) == expected

    def test_retirement_plan_is_not_an_amount(self):
        assert parse_salary_range("401(k) match") == "401(k) match"
        assert parse_salary_range("401(k) match, $70k - $90k a year") == "70,000 - 90,000 per year"

    def test_to_separator_and_month(self):
        assert parse_salary_range("3000 to 4000 per month") == "3,000 - 4,000 per month"

    def test_empty(self):
        assert parse_salary_range("") == ""


class TestExperience:
    @pytest.mark.parametrize("years,label", [
        (0, "Entry Level (0-1 years)"),
        (1, "Entry Level (0-1 years)"),
        (2, "Junior (1-3 years)"),
        (3, "Junior (1-3 years)"),
        (4, "Mid-Level (3-5 years)"),
        (5, "Mid-Level (3-5 years)"),
        (6, "Senior (5-8 years)"),
        (8, "Senior (5-8 years)"),
        (12, "Expert (8+ years)"),
    ])
    def test_bands(self, years, label):
        assert categorize_experience(years) == label

    def test_negative_years_rejected(self):
        with pytest.raises(ValueError):
            categorize_experience(-1)

    def test_extract_years(self):
        assert extract_years("3+ years of experience") == 3
        assert extract_years("2-4 yrs in a similar role") == 2
        assert extract_years("Senior level") is None

    def test_normalize_experience(self):
        assert normalize_experience("<li>7 years experience</li>") == "Senior (5-8 years)"
        assert normalize_experience("Mid-Senior level") == "Mid-Senior level"
