"""Shared fixtures for codecontext tests."""

from pathlib import Path

import pytest

from codecontext.config import ProjectConfig
from codecontext.git import Commit


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep tests away from real API keys and the user's state directory."""
    monkeypatch.delenv("ANTHROPIC_API_KEY", raising=False)
    monkeypatch.delenv("CODECONTEXT_ANTHROPIC_API_KEY", raising=False)
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path_factory.mktemp("state")))


@pytest.fixture
def quick_config():
    return ProjectConfig(mode="quick")


class FakeGit:
    """Stands in for GitClient."""

    def __init__(self, changed=None, commits=None):
        self.changed = list(changed or [])
        self.commits = list(commits or [])
        self.log_calls = []

    def changed_files(self, root: Path):
        return list(self.changed)

    def recent_commits(self, root: Path, limit: int = 5):
        self.log_calls.append((root, limit))
        return self.commits[:limit]


class RecordingEnricher:
    """AI collaborator double that returns canned answers and records calls."""

    def __init__(self, insights=None, description="AI description.", suggestions=None, available=True):
        self.insights = insights or {}
        self.description = description
        self.suggestions = suggestions or []
        self.available = available
        self.calls = []

    def is_available(self):
        return self.available

    def describe_file(self, path, content, parsed):
        self.calls.append(("describe_file", path))
        return self.description

    def analyze_directory(self, path, files, parsed_files, depth):
        self.calls.append(("analyze_directory", path, depth))
        return self.insights

    def suggest_improvements(self, analysis, depth):
        self.calls.append(("suggest_improvements", analysis.path, depth))
        return self.suggestions


class FailingEnricher(RecordingEnricher):
    """AI collaborator whose every call fails like a network outage."""

    def describe_file(self, path, content, parsed):
        raise ConnectionError("network unreachable")

    def analyze_directory(self, path, files, parsed_files, depth):
        raise ConnectionError("network unreachable")

    def suggest_improvements(self, analysis, depth):
        raise ConnectionError("network unreachable")


def make_commit(n: int) -> Commit:
    return Commit(id=f"{n:040x}", date=None, message=f"Commit {n}")
