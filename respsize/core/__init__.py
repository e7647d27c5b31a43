from .config import DimensionGrammar, EngineConfig
from .dimension import parse as parse_dimension
from .engine import SizeEngine, as_real_dimension
from .errors import PipelineNonTerminationError, SizeSpecError, SizeValidationError, UnknownFunctionError
from .io_utils import gather_inputs, list_images
from .models import (
    Dimension,
    EffectiveDimension,
    RealDimension,
    ResizeOptions,
    ResizeResult,
    ScalingStep,
    SizeSpec,
    Unit,
)
from .resize_service import destination_name, probe_dimension, resize_many

__all__ = [
    "DimensionGrammar",
    "EngineConfig",
    "parse_dimension",
    "SizeEngine",
    "as_real_dimension",
    "SizeSpecError",
    "SizeValidationError",
    "PipelineNonTerminationError",
    "UnknownFunctionError",
    "gather_inputs",
    "list_images",
    "Dimension",
    "EffectiveDimension",
    "RealDimension",
    "ResizeOptions",
    "ResizeResult",
    "ScalingStep",
    "SizeSpec",
    "Unit",
    "destination_name",
    "probe_dimension",
    "resize_many",
]
