"""Tests for size object canonicalization and normalization."""

import logging

import pytest

from respsize.core.engine import SizeEngine
from respsize.core.errors import SizeValidationError
from respsize.core.models import Dimension, ScalingStep, Unit


@pytest.fixture
def engine():
    return SizeEngine(log=logging.getLogger("respsize.tests"))


class TestElaborate:
    """Tests for shape canonicalization."""

    def test_bare_dimension_is_width(self, engine):
        """Test that a single token defines the width."""
        assert engine.elaborate(100) == {"width": 100, "original": {"width": 100}}

    def test_width_x_height(self, engine):
        """Test splitting on the uppercase separator."""
        assert engine.elaborate("50X25") == {
            "width": "50",
            "height": "25",
            "original": {"width": "50", "height": "25"},
        }

    def test_second_separator_is_fatal(self, engine):
        """Test that extra separators are not silently dropped."""
        with pytest.raises(SizeValidationError):
            engine.elaborate("1X2X3")

    def test_input_is_not_modified(self, engine):
        """Test that the caller's mapping stays untouched."""
        raw = {"width": "10", "function": ["cover"]}
        engine.elaborate(raw)
        assert raw == {"width": "10", "function": ["cover"]}

    def test_idempotent(self, engine):
        """Test that elaborating the original again gives the same shape."""
        first = engine.elaborate({"width": "10", "function": "cover"})
        assert engine.elaborate(first["original"]) == first
        assert engine.elaborate(first) == first

    def test_original_is_kept(self, engine):
        """Test that an existing snapshot is not overwritten."""
        elaborated = engine.elaborate({"width": "10", "original": {"width": "99"}})
        assert elaborated["original"] == {"width": "99"}


class TestNormalize:
    """Tests for function resolution and dimension parsing."""

    def test_default_function(self, engine):
        """Test that contain is used when no function is given."""
        spec = engine.normalize("300")
        assert [s.name for s in spec.functions] == ["contain"]
        assert spec.width == Dimension(Unit.PIXEL, 300)
        assert spec.height == Dimension.unspecified()

    def test_named_functions(self, engine):
        """Test scalar and list references."""
        assert [s.name for s in engine.normalize({"width": "1", "function": "cover"}).functions] == ["cover"]
        spec = engine.normalize({"width": "1", "height": "2", "function": ["check", "exact"]})
        assert [s.name for s in spec.functions] == ["check", "exact"]
        assert all(s.builtin for s in spec.functions)

    def test_callable_function(self, engine):
        """Test that callables become custom steps."""
        def shrink(spec, real):
            return None

        spec = engine.normalize({"width": "1", "function": shrink})
        step = spec.functions[0]
        assert isinstance(step, ScalingStep)
        assert step.name == "shrink"
        assert not step.builtin

    def test_unknown_name_warns_once(self, engine, caplog):
        """Test that unknown names fall back to contain with one warning."""
        caplog.set_level(logging.WARNING)
        spec = engine.normalize({"width": "1", "function": ["bogus"]})
        assert [s.name for s in spec.functions] == ["contain"]
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Unknown size function 'bogus'" in warnings[0].getMessage()

    def test_invalid_reference_warns(self, engine, caplog):
        """Test that non-callable objects fall back to contain."""
        caplog.set_level(logging.WARNING)
        spec = engine.normalize({"width": "1", "function": 42})
        assert [s.name for s in spec.functions] == ["contain"]
        assert "Invalid object of type int" in caplog.text

    def test_empty_function_list(self, engine):
        """Test that an explicit empty list disables scaling."""
        assert engine.normalize({"width": "1", "function": []}).functions == ()

    def test_extras_are_carried(self, engine):
        """Test that unknown keys survive normalization."""
        spec = engine.normalize({"width": "10", "name": "thumb"})
        assert dict(spec.extras) == {"name": "thumb"}
        assert spec.original["width"] == "10"
