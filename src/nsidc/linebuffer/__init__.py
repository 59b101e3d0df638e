__version__ = "v0.1.0"


__all__ = [
    "__version__",
    "BufferAnalyzer",
    "ConstructionError",
    "ValidationError",
    "analyzer",
    "config",
    "constants",
    "errors",
    "geometry",
    "index",
    "models",
    "orchestrator",
    "segmenter",
]

from . import analyzer
from . import config
from . import constants
from . import errors
from . import geometry
from . import index
from . import models
from . import orchestrator
from . import segmenter
from .analyzer import BufferAnalyzer
from .errors import ConstructionError, ValidationError
