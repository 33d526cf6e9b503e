from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0.dev0"

# Public API - the graph snapshot and one session class per algorithm.
# Everything else is reachable via its full path (e.g., graphtutor.predicates).

if TYPE_CHECKING:
    from graphtutor.graph import Edge as Edge
    from graphtutor.graph import Graph as Graph
    from graphtutor.graph import Vertex as Vertex
    from graphtutor.kruskal import KruskalValidator as KruskalValidator
    from graphtutor.postman import ChinesePostman as ChinesePostman
    from graphtutor.postman import ChinesePostmanSolver as ChinesePostmanSolver
    from graphtutor.practical_tsp import PracticalTSP as PracticalTSP
    from graphtutor.prim import PrimValidator as PrimValidator
    from graphtutor.prim_table import PrimTable as PrimTable
    from graphtutor.tsp import TSPBounds as TSPBounds
    from graphtutor.types import ErrorKind as ErrorKind
    from graphtutor.types import Verdict as Verdict

# Lazy import mapping for runtime
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "Edge": ("graphtutor.graph", "Edge"),
    "Graph": ("graphtutor.graph", "Graph"),
    "Vertex": ("graphtutor.graph", "Vertex"),
    "KruskalValidator": ("graphtutor.kruskal", "KruskalValidator"),
    "ChinesePostman": ("graphtutor.postman", "ChinesePostman"),
    "ChinesePostmanSolver": ("graphtutor.postman", "ChinesePostmanSolver"),
    "PracticalTSP": ("graphtutor.practical_tsp", "PracticalTSP"),
    "PrimTable": ("graphtutor.prim_table", "PrimTable"),
    "PrimValidator": ("graphtutor.prim", "PrimValidator"),
    "TSPBounds": ("graphtutor.tsp", "TSPBounds"),
    "ErrorKind": ("graphtutor.types", "ErrorKind"),
    "Verdict": ("graphtutor.types", "Verdict"),
}


def __getattr__(name: str) -> object:
    """Lazily import public API members on first access."""
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        import importlib

        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        # Cache in module globals for subsequent access
        globals()[name] = value
        return value
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)


def __dir__() -> list[str]:
    """List available attributes including lazy imports."""
    return list(globals().keys()) + list(_LAZY_IMPORTS.keys())
