from dataclasses import dataclass, field, replace
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Tuple, Union


class Unit(str, Enum):
    PIXEL = "px"
    FACTOR = "x"
    UNSPECIFIED = "unspecified"
    INVALID = "invalid"


@dataclass(frozen=True)
class Dimension:
    """A single width or height, split into unit and value.

    ``value`` is an int for pixels, a float for factors and ``None`` for
    unspecified or invalid dimensions.
    """
    unit: Unit
    value: Optional[float] = None

    @classmethod
    def pixel(cls, value) -> "Dimension":
        return cls(Unit.PIXEL, value)

    @classmethod
    def factor(cls, value: float) -> "Dimension":
        return cls(Unit.FACTOR, float(value))

    @classmethod
    def unspecified(cls) -> "Dimension":
        return cls(Unit.UNSPECIFIED, None)

    @classmethod
    def invalid(cls) -> "Dimension":
        return cls(Unit.INVALID, None)

    @property
    def specified(self) -> bool:
        return self.unit is not Unit.UNSPECIFIED

    @property
    def concrete(self) -> bool:
        return self.unit in (Unit.PIXEL, Unit.FACTOR)

    def as_dict(self) -> dict:
        return {"unit": self.unit.value, "value": self.value}


@dataclass(frozen=True)
class RealDimension:
    """Actual pixel size of a source asset, as reported by a probe."""
    width: float
    height: float

    def __post_init__(self):
        for axis in ("width", "height"):
            v = getattr(self, axis)
            if isinstance(v, bool) or not isinstance(v, Real) or v <= 0:
                raise ValueError(f"Real {axis} must be a positive number, got {v!r}")


@dataclass(frozen=True)
class EffectiveDimension:
    width: int
    height: int

    def as_tuple(self) -> Tuple[int, int]:
        return self.width, self.height

    def as_dict(self) -> dict:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True)
class ScalingStep:
    """One entry of the scaling queue: a built-in policy or a custom callable."""
    name: str
    func: Callable[..., Any]
    builtin: bool = False

    def __call__(self, spec: "SizeSpec", real: RealDimension):
        return self.func(spec, real)


# A queue entry before resolution: a registered name, a callable, or
# an already resolved step.
FunctionRef = Union[str, Callable[..., Any], ScalingStep]


def _frozen(mapping: Optional[Mapping]) -> Mapping:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True)
class SizeSpec:
    """A normalized size object.

    ``functions`` is the pending queue, front first. Entries may still be
    unresolved references (names or callables appended by a step); the
    next normalization resolves them. ``original`` is the canonicalized
    but unparsed input, captured once per calculation.
    """
    width: Dimension
    height: Dimension
    functions: Tuple[FunctionRef, ...] = ()
    original: Mapping = field(default_factory=lambda: _frozen(None))
    extras: Mapping = field(default_factory=lambda: _frozen(None))

    def __post_init__(self):
        object.__setattr__(self, "functions", tuple(self.functions))
        object.__setattr__(self, "original", _frozen(self.original))
        object.__setattr__(self, "extras", _frozen(self.extras))

    def with_size(self, width: Dimension, height: Dimension) -> "SizeSpec":
        return replace(self, width=width, height=height)

    def then(self, *refs: FunctionRef) -> "SizeSpec":
        """Return a copy with ``refs`` appended to the end of the queue."""
        return replace(self, functions=self.functions + tuple(refs))

    def pop_step(self) -> Tuple[FunctionRef, "SizeSpec"]:
        return self.functions[0], replace(self, functions=self.functions[1:])


@dataclass(frozen=True)
class ResizeOptions:
    sizes: Tuple[Any, ...] = ("50%",)
    function: Optional[str] = None
    name_template: str = "{name}-w{width}"
    format_choice: str = "keep"
    jpg_quality: int = 85
    overwrite: bool = False


@dataclass
class ResizeResult:
    src_path: str
    dst_path: Optional[str]
    ok: bool
    error: Optional[str] = None
    size: Any = None
    in_size: Optional[Tuple[int, int]] = None
    out_size: Optional[Tuple[int, int]] = None
