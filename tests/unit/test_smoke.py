"""
Smoke tests to verify all critical dependencies are installed correctly.

These tests confirm that:
1. Python 3.11+ is installed
2. All core dependencies are importable
3. Project version is accessible

Run with: pytest tests/unit/test_smoke.py -v
"""

import sys


class TestPythonVersion:
    """Verify Python version requirements."""

    def test_python_311_or_higher(self) -> None:
        assert sys.version_info >= (3, 11), (
            f"Python 3.11+ required, "
            f"got {sys.version_info.major}.{sys.version_info.minor}"
        )


class TestStructuredLogging:
    """Verify structured logging for round events."""

    def test_structlog_configuration(self) -> None:
        """structlog can be bound with context."""
        import structlog

        logger = structlog.get_logger()
        bound_logger = logger.bind(component="vote_tally", round_id="r-1")
        assert bound_logger is not None

    def test_structlog_contextvars(self) -> None:
        from structlog.contextvars import bound_contextvars, merge_contextvars

        assert bound_contextvars is not None
        assert merge_contextvars is not None


class TestIdentifiers:
    """Verify time-ordered round identifiers."""

    def test_uuid7_available(self) -> None:
        from uuid6 import uuid7

        assert uuid7().version == 7


class TestPropertyBasedTesting:
    """Verify hypothesis for vote invariant testing."""

    def test_hypothesis_import(self) -> None:
        from hypothesis import given, strategies

        assert given is not None
        assert strategies is not None


class TestProjectVersion:
    """Verify project metadata is accessible."""

    def test_version_accessible(self, project_version: str) -> None:
        assert isinstance(project_version, str)
        assert len(project_version) > 0

    def test_version_format(self, project_version: str) -> None:
        """Version must be in semver format."""
        parts = project_version.split(".")
        assert len(parts) >= 2, f"Version must be semver format, got {project_version}"
