"""Validation, proportional inference and the built-in scaling functions.

Every scaling function takes ``(spec, real)`` and returns the next spec;
nothing is modified in place.
"""
from functools import partial
from typing import Dict

from .errors import SizeValidationError, fatal
from .models import Dimension, RealDimension, ScalingStep, SizeSpec, Unit
from .size_object import describe


def relative(dim: Dimension, real_axis: float) -> float:
    """Express ``dim`` as a fraction of the real axis length."""
    if dim.unit is Unit.FACTOR:
        return dim.value
    if dim.unit is Unit.PIXEL:
        return dim.value / real_axis
    raise SizeValidationError(f"Cannot relate a {dim.unit.value} dimension to the source size")


def absolute(dim: Dimension, real_axis: float) -> float:
    if dim.unit is Unit.FACTOR:
        return dim.value * real_axis
    if dim.unit is Unit.PIXEL:
        return dim.value
    raise SizeValidationError(f"Cannot resolve a {dim.unit.value} dimension to pixels")


def validate(spec: SizeSpec, log) -> SizeSpec:
    """Check ``spec`` and return it with an invalid height dropped.

    An invalid width is fatal, an invalid height only warns and is then
    treated as unspecified.
    """
    if spec.width.unit is Unit.INVALID:
        fatal(log, f"Invalid width '{spec.original.get('width')}' specified")
    if spec.height.unit is Unit.INVALID:
        log.warning(f"Invalid height '{spec.original.get('height')}' specified, ignoring it")
        spec = spec.with_size(spec.width, Dimension.unspecified())
    if not spec.width.specified and not spec.height.specified:
        fatal(
            log,
            "Invalid size object: please specify at least width or height\n"
            f" For size object: {describe(spec.original)}",
        )
    return spec


def infer_unspecified(spec: SizeSpec, real: RealDimension) -> SizeSpec:
    """Fill a missing axis so that it keeps the source aspect ratio."""
    width, height = spec.width, spec.height
    if not width.specified:
        width = Dimension.pixel(relative(height, real.height) * real.width)
    if not height.specified:
        height = Dimension.pixel(relative(width, real.width) * real.height)
    return spec.with_size(width, height)


def check(spec: SizeSpec, real: RealDimension, log) -> SizeSpec:
    return validate(spec, log)


def contain(spec: SizeSpec, real: RealDimension, log) -> SizeSpec:
    """Largest uniform scale that fits inside the box."""
    spec = infer_unspecified(validate(spec, log), real)
    f = min(relative(spec.height, real.height), relative(spec.width, real.width))
    return spec.with_size(Dimension.factor(f), Dimension.factor(f))


def cover(spec: SizeSpec, real: RealDimension, log) -> SizeSpec:
    """Smallest uniform scale that covers the whole box."""
    spec = infer_unspecified(validate(spec, log), real)
    f = max(relative(spec.height, real.height), relative(spec.width, real.width))
    return spec.with_size(Dimension.factor(f), Dimension.factor(f))


def exact(spec: SizeSpec, real: RealDimension, log) -> SizeSpec:
    spec = validate(spec, log)
    if not spec.width.specified or not spec.height.specified:
        fatal(
            log,
            "When using exact sizing, both width and height have to be specified!\n"
            f" For size object: {describe(spec.original)}",
        )
    return spec


def builtin_steps(log) -> Dict[str, ScalingStep]:
    return {
        func.__name__: ScalingStep(func.__name__, partial(func, log=log), builtin=True)
        for func in (contain, cover, exact, check)
    }
