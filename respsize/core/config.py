import re
from dataclasses import dataclass, field
from typing import Pattern

BUILTIN_FUNCTIONS = ("contain", "cover", "exact", "check")


@dataclass(frozen=True)
class DimensionGrammar:
    """Token grammars for a single dimension, tried in declaration order."""
    pixel: Pattern = field(default_factory=lambda: re.compile(r"^([0-9]+)(px)?$"))
    factor: Pattern = field(default_factory=lambda: re.compile(r"^([0-9]*\.?[0-9]+)(x)$"))
    percent: Pattern = field(default_factory=lambda: re.compile(r"^([0-9]*\.?[0-9]+)(%|pc)$"))


@dataclass(frozen=True)
class EngineConfig:
    default_function: str = "contain"
    separator: str = "X"
    max_steps: int = 100
    grammar: DimensionGrammar = field(default_factory=DimensionGrammar)

    def __post_init__(self):
        if self.default_function not in BUILTIN_FUNCTIONS:
            raise ValueError(
                f"default_function must be one of {', '.join(BUILTIN_FUNCTIONS)}, "
                f"got {self.default_function!r}"
            )
        if not self.separator:
            raise ValueError("separator must not be empty")
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be >= 1, got {self.max_steps}")
