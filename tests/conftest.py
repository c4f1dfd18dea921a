"""Shared test fixtures for Overtime Insight tests."""

from datetime import date, timedelta

import pytest

from overtime_insight.samples.models import CommitTimeSample

OFFICE_TIMES = ("09:10", "10:20", "11:30", "14:05", "14:30", "15:10", "15:40", "16:50", "17:30")


def pytest_addoption(parser):
    """Add --run-slow option for slow tests."""
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="run slow tests",
    )


def pytest_configure(config):
    """Configure slow marker."""
    config.addinivalue_line("markers", "slow: mark test as slow to run")


def pytest_collection_modifyitems(config, items):
    """Skip slow tests unless --run-slow is given."""
    if config.getoption("--run-slow"):
        return
    skip_slow = pytest.mark.skip(reason="need --run-slow option to run")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def _make_sample(day, hhmm, author="alice", email=None, offset=None):
    hour, minute = (int(part) for part in hhmm.split(":"))
    return CommitTimeSample(
        date=day,
        weekday=date.fromisoformat(day).isoweekday(),
        hour=hour,
        minute_of_day=hour * 60 + minute,
        author=author,
        email=email or (f"{author}@example.com" if author else None),
        utc_offset=offset,
    )


def _weekdays(start="2024-03-04", weeks=4):
    first = date.fromisoformat(start)
    days = []
    for offset in range(weeks * 7):
        day = first + timedelta(days=offset)
        if day.isoweekday() <= 5:
            days.append(day.isoformat())
    return days


@pytest.fixture
def make_sample():
    """Factory for a single commit-time sample: make_sample("2024-03-04", "09:30")."""
    return _make_sample


@pytest.fixture
def weekdays():
    """Factory for the ISO weekday dates of N weeks starting on a Monday."""
    return _weekdays


@pytest.fixture
def office_samples():
    """Four weeks (2024-03-04 to 2024-03-29) of a 09:00-18:00 weekday schedule, one author."""
    return [_make_sample(day, t) for day in _weekdays() for t in OFFICE_TIMES]


@pytest.fixture
def team_samples():
    """Three authors over four weeks of weekdays, 40 commits each."""
    schedule = {
        "alice": ("10:00", "15:00"),
        "bob": ("10:30", "19:30"),
        "carol": ("11:00", "16:00"),
    }
    return [
        _make_sample(day, t, author=author)
        for author, times in schedule.items()
        for day in _weekdays()
        for t in times
    ]


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with an empty home and working directory and no OVERTIME_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(project)
    for name in (
        "CUSTOM_WORK_HOURS",
        "SINCE",
        "UNTIL",
        "TREND",
        "SKIP_TEAM_ANALYSIS",
        "VERBOSITY",
    ):
        monkeypatch.delenv(f"OVERTIME_{name}", raising=False)
    return project
