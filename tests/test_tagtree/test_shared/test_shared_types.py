"""Tests for errors, result types and logging helpers."""

import logging

import pytest

from tagtree.shared import (
    CorrelationLogger,
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    StructureError,
    TagTreeError,
    XMLSyntaxError,
    get_logger,
)


class TestErrors:
    """Test the exception hierarchy."""

    def test_line_is_prefixed(self):
        """Test that the line number appears in the message."""
        error = XMLSyntaxError("empty tag", 3)
        assert str(error) == "line 3: empty tag"
        assert error.message == "empty tag"
        assert error.line == 3

    def test_without_line(self):
        """Test errors without a known line."""
        error = StructureError("Must close the root tag")
        assert str(error) == "Must close the root tag"
        assert error.line is None

    def test_hierarchy(self):
        """Test that both error kinds share a base class."""
        assert issubclass(XMLSyntaxError, TagTreeError)
        assert issubclass(StructureError, TagTreeError)
        assert not issubclass(XMLSyntaxError, StructureError)


class TestDiagnosticEntry:
    """Test diagnostic entries."""

    def test_to_dict(self):
        """Test conversion to a plain dictionary."""
        entry = DiagnosticEntry(DiagnosticSeverity.WARNING, "bad line", "config_loader", line=2)
        assert entry.to_dict() == {
            "severity": "WARNING",
            "message": "bad line",
            "component": "config_loader",
            "line": 2,
        }

    def test_validation(self):
        """Test that incomplete entries are rejected."""
        with pytest.raises(ValueError, match="message"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "", "x")
        with pytest.raises(ValueError, match="component"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "")
        with pytest.raises(ValueError, match="line"):
            DiagnosticEntry(DiagnosticSeverity.INFO, "msg", "x", line=0)


class TestPerformanceMetrics:
    """Test performance metric rates."""

    def test_rates(self):
        """Test per-second rates."""
        metrics = PerformanceMetrics(
            processing_time_ms=500.0, characters_processed=1000, tokens_generated=50
        )
        assert metrics.characters_per_second == 2000.0
        assert metrics.tokens_per_second == 100.0

    def test_zero_time(self):
        """Test that zero duration gives zero rates."""
        metrics = PerformanceMetrics(characters_processed=10)
        assert metrics.characters_per_second == 0.0
        assert metrics.tokens_per_second == 0.0


class TestCorrelationLogger:
    """Test structured logging."""

    def test_component_defaults_to_module_name(self):
        """Test the default component name."""
        assert get_logger("tagtree.tree.builder").component == "builder"

    def test_records_carry_context(self, caplog):
        """Test that records include component and correlation id."""
        logger = get_logger("tagtree.test", "req-1", "tester")
        with caplog.at_level(logging.INFO, logger="tagtree.test"):
            logger.info("hello", extra={"count": 2})

        record = caplog.records[-1]
        assert record.component == "tester"
        assert record.correlation_id == "req-1"
        assert record.count == 2

    def test_bind_keeps_correlation_id(self):
        """Test binding another component."""
        logger = CorrelationLogger("tagtree.test", "req-2", "first")
        bound = logger.bind("second")
        assert bound.component == "second"
        assert bound.correlation_id == "req-2"
