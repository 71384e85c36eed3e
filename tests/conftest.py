"""Shared fixtures: a resolver over a fixed set of classes and a sink that records measures."""

from pathlib import Path

import pytest


class FakeResolver:
    """Resolves known class names to a resource name, everything else to None."""

    def __init__(self, known=None):
        self.known = known
        self.calls = []

    def resolve(self, class_key):
        self.calls.append(class_key)
        if self.known is None or class_key in self.known:
            return f"file:{class_key.replace('.', '/')}.java"
        return None


class RecordingSink:
    def __init__(self):
        self.measures = []

    def save_measure(self, resource, metric, value):
        self.measures.append((resource, metric, value))

    def for_resource(self, resource):
        return {metric: value for r, metric, value in self.measures if r == resource}


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def write_report(tmp_path):
    """Write an XML report into tmp_path and return its path."""
    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path
    return _write
