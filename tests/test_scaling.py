"""Tests for validation, inference and the built-in scaling functions."""

import logging

import pytest

from respsize.core.engine import SizeEngine
from respsize.core.errors import SizeValidationError
from respsize.core.models import Dimension, RealDimension, Unit
from respsize.core.scaling import (
    absolute,
    contain,
    cover,
    exact,
    infer_unspecified,
    relative,
    validate,
)

LOG = logging.getLogger("respsize.tests")
REAL = RealDimension(200, 100)


def spec_of(raw):
    return SizeEngine(log=LOG).normalize(raw)


class TestRelativeAbsolute:
    """Tests for unit conversion helpers."""

    def test_relative(self):
        """Test factors pass through and pixels divide by the axis."""
        assert relative(Dimension.factor(0.3), 200) == pytest.approx(0.3)
        assert relative(Dimension.pixel(50), 200) == pytest.approx(0.25)

    def test_absolute(self):
        """Test factors multiply and pixels pass through."""
        assert absolute(Dimension.factor(0.3), 200) == pytest.approx(60)
        assert absolute(Dimension.pixel(50), 200) == 50

    def test_unspecified_has_no_size(self):
        """Test that non-concrete dimensions are rejected."""
        with pytest.raises(SizeValidationError):
            relative(Dimension.unspecified(), 200)
        with pytest.raises(SizeValidationError):
            absolute(Dimension.invalid(), 200)


class TestValidate:
    """Tests for the validator."""

    def test_valid_spec_unchanged(self):
        """Test that a valid spec passes through."""
        spec = spec_of("100")
        assert validate(spec, LOG) == spec

    def test_both_unspecified(self):
        """Test that at least one axis is required."""
        with pytest.raises(SizeValidationError, match="at least width or height"):
            validate(spec_of({}), LOG)

    def test_invalid_width(self):
        """Test that an invalid width is fatal."""
        with pytest.raises(SizeValidationError, match="Invalid width 'abc'"):
            validate(spec_of("abc"), LOG)

    def test_invalid_height_warns(self, caplog):
        """Test that an invalid height is dropped with a warning."""
        caplog.set_level(logging.WARNING)
        spec = validate(spec_of({"width": "10", "height": "tall"}), LOG)
        assert spec.height == Dimension.unspecified()
        assert "Invalid height 'tall'" in caplog.text

    def test_invalid_height_alone(self, caplog):
        """Test that a dropped height cannot satisfy the one-axis rule."""
        with pytest.raises(SizeValidationError):
            validate(spec_of({"height": "tall"}), LOG)

    def test_errors_are_logged(self, caplog):
        """Test that fatal conditions are reported before raising."""
        caplog.set_level(logging.ERROR)
        with pytest.raises(SizeValidationError):
            validate(spec_of({}), LOG)
        assert any(r.levelno == logging.ERROR for r in caplog.records)


class TestInference:
    """Tests for proportional inference."""

    def test_height_from_width(self):
        """Test that the missing height keeps the aspect ratio."""
        spec = infer_unspecified(spec_of("100"), REAL)
        assert spec.height.unit is Unit.PIXEL
        assert spec.height.value == pytest.approx(50)

    def test_width_from_height(self):
        """Test the symmetric rule."""
        spec = infer_unspecified(spec_of({"height": "0.5x"}), REAL)
        assert spec.width.value == pytest.approx(100)
        assert spec.height == Dimension.factor(0.5)

    def test_complete_spec_untouched(self):
        """Test that specified axes are kept."""
        spec = spec_of("10X20")
        assert infer_unspecified(spec, REAL) == spec


class TestBuiltins:
    """Tests for contain, cover and exact."""

    def test_contain_uses_smaller_factor(self):
        """Test that contain fits inside the box."""
        spec = contain(spec_of("100X100"), REAL, LOG)
        assert spec.width == spec.height == Dimension.factor(0.5)

    def test_cover_uses_larger_factor(self):
        """Test that cover fills the box."""
        spec = cover(spec_of("100X100"), REAL, LOG)
        assert spec.width == spec.height == Dimension.factor(1.0)

    def test_single_axis_contain_equals_cover(self):
        """Test that both policies agree when one axis is inferred."""
        spec = spec_of("50")
        contained, covered = contain(spec, REAL, LOG), cover(spec, REAL, LOG)
        assert (contained.width, contained.height) == (covered.width, covered.height)

    def test_exact_keeps_dimensions(self):
        """Test that exact does not correct the aspect ratio."""
        spec = spec_of("300X10")
        assert exact(spec, REAL, LOG) == spec

    def test_exact_needs_both_axes(self):
        """Test that exact rejects a missing axis."""
        with pytest.raises(SizeValidationError, match="exact sizing"):
            exact(spec_of("300"), REAL, LOG)

    def test_builtins_do_not_touch_input(self):
        """Test that a new spec is returned."""
        spec = spec_of("100")
        contain(spec, REAL, LOG)
        assert spec.width == Dimension.pixel(100)
        assert spec.height == Dimension.unspecified()
