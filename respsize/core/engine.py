import logging
import math
from numbers import Real
from typing import Any, Callable, Mapping, Optional, Tuple

from .config import BUILTIN_FUNCTIONS, EngineConfig
from .errors import PipelineNonTerminationError, UnknownFunctionError, fatal
from .models import EffectiveDimension, RealDimension, ScalingStep, SizeSpec
from .scaling import absolute, builtin_steps
from .size_object import canonicalize, describe, normalize


def as_real_dimension(width_or_dimension: Any, height: Optional[float] = None) -> RealDimension:
    """Accept a RealDimension, a {width, height} mapping, a (w, h) pair or two numbers."""
    value = width_or_dimension
    if isinstance(value, RealDimension):
        return value
    if isinstance(value, Mapping):
        return RealDimension(value["width"], value["height"])
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return RealDimension(*value)
    if isinstance(value, Real) and height is not None:
        return RealDimension(value, height)
    raise TypeError(f"Cannot read a real dimension from {value!r}")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class SizeEngine:
    """Resolves size objects against the real size of an image.

    ``log`` receives ``warning`` and ``error`` calls, the same interface as
    a :class:`logging.Logger`; ``warning`` takes the place of a ``warn``
    method. Errors are always followed by an exception, so a failed
    calculation never returns.
    """

    def __init__(self, log=None, config: Optional[EngineConfig] = None):
        self.log = log or logging.getLogger("respsize")
        self.config = config or EngineConfig()
        self._registry = builtin_steps(self.log)

    @property
    def function_names(self) -> Tuple[str, ...]:
        return tuple(self._registry)

    def register(self, name: str, func: Callable[[SizeSpec, RealDimension], Any]) -> None:
        """Make ``func`` available as a scaling function called ``name``."""
        if not isinstance(name, str) or not name:
            raise UnknownFunctionError(f"Size function names must be non-empty strings, got {name!r}")
        if name in BUILTIN_FUNCTIONS:
            raise UnknownFunctionError(f"Built-in size function '{name}' cannot be replaced")
        if not callable(func):
            raise UnknownFunctionError(f"Size function '{name}' is not callable")
        self._registry[name] = ScalingStep(name, func)

    def elaborate(self, size: Any) -> dict:
        """Canonical mapping form of ``size``, without running any function."""
        return canonicalize(size, self.config, self.log)

    def normalize(self, size: Any) -> SizeSpec:
        return normalize(size, self._registry, self.config, self.log)

    def calculate(self, size: Any, real: Any) -> SizeSpec:
        """Run the scaling queue of ``size`` until it is empty.

        Steps may append further steps; the total number executed is capped
        by ``config.max_steps``.
        """
        real = as_real_dimension(real)
        spec = self.normalize(size)
        original = spec.original
        executed = 0
        while spec.functions:
            if executed >= self.config.max_steps:
                err = PipelineNonTerminationError(self.config.max_steps, len(spec.functions))
                self.log.error(f"{err}\n For size object: {describe(original)}")
                raise err
            step, spec = spec.pop_step()
            result = step(spec, real)
            executed += 1
            spec = normalize(result or spec, self._registry, self.config, self.log, original=original)
        return spec

    def to_pixel(self, size: Any, real_width_or_dimension: Any, real_height: Optional[float] = None) -> EffectiveDimension:
        """Resolve ``size`` to whole pixels for a source of the given real size."""
        real = as_real_dimension(real_width_or_dimension, real_height)
        spec = self.calculate(size, real)
        if not (spec.width.concrete and spec.height.concrete):
            fatal(
                self.log,
                "Size object did not resolve to a width and a height\n"
                f" For size object: {describe(spec.original)}",
            )
        abs_width, abs_height = absolute(spec.width, real.width), absolute(spec.height, real.height)
        try:
            finite = math.isfinite(abs_width) and math.isfinite(abs_height)
        except OverflowError:
            finite = False
        if not finite:
            fatal(
                self.log,
                "Size object resolved to a size too large to represent\n"
                f" For size object: {describe(spec.original)}",
            )
        width, height = round_half_up(abs_width), round_half_up(abs_height)
        if width < 0 or height < 0:
            fatal(self.log, f"Size object resolved to a negative size {width}x{height}")
        return EffectiveDimension(width, height)
