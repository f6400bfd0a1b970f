"""
Native Catalog - search documented game natives and render their call signatures.
"""

from .catalog import CatalogIndex, RenderGroup
from .controller import AppState, SelectionController
from .models import *
from .renderer import IncrementalRenderer
from .signatures import SignatureSynthesizer, synthesize
from .types import UNREPRESENTABLE, map_type

try:
    from importlib.metadata import version as _get_version
    __version__ = _get_version("native-catalog")
except Exception:
    __version__ = "0.1.0"  # Fallback if metadata unavailable
__all__ = [
    "CatalogIndex",
    "RenderGroup",
    "AppState",
    "SelectionController",
    "IncrementalRenderer",
    "SignatureSynthesizer",
    "synthesize",
    "UNREPRESENTABLE",
    "map_type",
]
