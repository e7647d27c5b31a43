"""Canonicalization and normalization of user supplied size objects.

A size object is one of:

* a single dimension (``320``, ``"50%"``, ``"0.5x"``), defining the width
* a ``"<width>X<height>"`` string (note the uppercase separator)
* a mapping with optional ``width``, ``height`` and ``function`` keys;
  ``function`` is a name, a callable or a list of those, run in order
"""
import json
from typing import Any, Mapping, Optional

from .config import EngineConfig
from .dimension import parse
from .errors import fatal
from .models import ScalingStep, SizeSpec

RESERVED_KEYS = ("width", "height", "function", "original")


def describe(obj: Any) -> str:
    """Readable one-line rendering of a raw or canonical size object."""
    if isinstance(obj, Mapping):
        obj = {k: v for k, v in obj.items() if k != "original"}
    try:
        return json.dumps(obj, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return repr(obj)


def _split(raw: str, config: EngineConfig, log) -> dict:
    parts = raw.split(config.separator)
    if len(parts) != 2:
        fatal(log, f"Invalid size '{raw}': expected '<width>{config.separator}<height>'")
    return {"width": parts[0], "height": parts[1]}


def clone(obj: Any) -> Any:
    """Copy nested mappings and lists; everything else, callables included, is shared."""
    if isinstance(obj, Mapping):
        return {k: clone(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [clone(v) for v in obj]
    return obj


def _from_spec(spec: SizeSpec) -> dict:
    canonical = {"width": spec.width.as_dict(), "height": spec.height.as_dict(), **clone(spec.extras)}
    if spec.functions:
        canonical["function"] = list(spec.functions)
    if spec.original:
        canonical["original"] = clone(spec.original)
    return canonical


def canonicalize(raw: Any, config: EngineConfig, log) -> dict:
    """Bring ``raw`` into mapping form and capture ``original`` if missing.

    The input is never modified; nested mappings and lists are copied.
    """
    if isinstance(raw, SizeSpec):
        canonical = _from_spec(raw)
    elif isinstance(raw, Mapping):
        canonical = clone(raw)
    elif raw is None:
        canonical = {}
    elif isinstance(raw, str) and config.separator in raw:
        canonical = _split(raw, config, log)
    else:
        canonical = {"width": raw}

    if not canonical.get("original"):
        snapshot = {k: v for k, v in canonical.items() if k != "original"}
        canonical["original"] = clone(snapshot)
    return canonical


def _function_list(value) -> list:
    if isinstance(value, (list, tuple)):
        return list(value)
    if value is None or value is False or value == "":
        return []
    return [value]


def resolve_functions(refs, registry: Mapping[str, ScalingStep], config: EngineConfig, log) -> tuple:
    """Turn every queue entry into a :class:`ScalingStep`.

    Unknown names and unusable objects fall back to the default function
    with a warning.
    """
    default = config.default_function
    known = ", ".join(f"'{n}'" for n in registry)
    steps = []
    for ref in refs:
        if isinstance(ref, ScalingStep):
            steps.append(ref)
        elif isinstance(ref, str):
            if ref not in registry:
                log.warning(
                    f"Unknown size function '{ref}', using '{default}' instead.\n"
                    f"(expected one of {known})"
                )
                ref = default
            steps.append(registry[ref])
        elif callable(ref):
            steps.append(ScalingStep(getattr(ref, "__name__", repr(ref)), ref))
        else:
            log.warning(
                f"Invalid object of type {type(ref).__name__} provided as size function, "
                f"using '{default}' instead.\n(expected a function or one of {known})"
            )
            steps.append(registry[default])
    return tuple(steps)


def normalize(
    raw: Any,
    registry: Mapping[str, ScalingStep],
    config: EngineConfig,
    log,
    original: Optional[Mapping] = None,
) -> SizeSpec:
    """Normalize ``raw`` into a :class:`SizeSpec`.

    ``original`` pins the snapshot taken earlier in the same calculation;
    without it the snapshot is taken from ``raw`` itself.
    """
    if isinstance(raw, SizeSpec):
        return SizeSpec(
            parse(raw.width, config.grammar),
            parse(raw.height, config.grammar),
            resolve_functions(raw.functions, registry, config, log),
            raw.original if original is None else original,
            raw.extras,
        )

    canonical = canonicalize(raw, config, log)
    if original is not None:
        canonical["original"] = original
    refs = _function_list(canonical.get("function"))
    if not refs and not isinstance(canonical.get("function"), (list, tuple)):
        # absent: default function; an explicit empty list means no scaling
        refs = [config.default_function]

    return SizeSpec(
        width=parse(canonical.get("width"), config.grammar),
        height=parse(canonical.get("height"), config.grammar),
        functions=resolve_functions(refs, registry, config, log),
        original=canonical["original"],
        extras={k: v for k, v in canonical.items() if k not in RESERVED_KEYS},
    )
