"""Graph documents: a small YAML or JSON description of a weighted graph.

    vertices: [A, B, C]
    edges:
      - {from: A, to: B, weight: 9}
      - {from: B, to: C, weight: 8}

JSON documents use the same keys. Vertices that only appear in edges are
added implicitly; ``vertices`` exists to declare isolated vertices and to
fix the vertex order.
"""

from __future__ import annotations

import collections
import logging
from typing import TYPE_CHECKING, Annotated, Any

import pydantic
import ruamel.yaml

from graphtutor import exceptions
from graphtutor.graph import Graph

if TYPE_CHECKING:
    import pathlib

__all__ = [
    "EdgeSpec",
    "GraphDocument",
    "load_graph",
    "parse_graph",
]

logger = logging.getLogger(__name__)


class EdgeSpec(pydantic.BaseModel):
    """One edge, by endpoint labels."""

    model_config = pydantic.ConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        extra="forbid", populate_by_name=True, coerce_numbers_to_str=True
    )

    start: str = pydantic.Field(alias="from")
    end: str = pydantic.Field(alias="to")
    weight: Annotated[float, pydantic.Field(ge=0)] = 0.0


class GraphDocument(pydantic.BaseModel):
    """Top-level graph document."""

    model_config = pydantic.ConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        extra="forbid", coerce_numbers_to_str=True
    )

    vertices: list[str] = []
    edges: list[EdgeSpec] = []

    @pydantic.field_validator("vertices")
    @classmethod
    def validate_unique_labels(cls, v: list[str]) -> list[str]:
        """Labels name vertices, so each may be declared once."""
        counts = collections.Counter(v)
        duplicates = sorted(label for label, n in counts.items() if n > 1)
        if duplicates:
            raise ValueError(f"duplicate vertex labels: {', '.join(duplicates)}")
        return v

    def to_graph(self) -> Graph:
        return Graph.from_edge_list(
            [(edge.start, edge.end, edge.weight) for edge in self.edges],
            labels=self.vertices,
        )


def parse_graph(data: Any, source: str = "<document>") -> Graph:
    """Validate already-loaded document data and build its graph.

    Raises:
        GraphDocumentError: The data does not describe a graph.
    """
    if data is None:
        data = {}
    try:
        document = GraphDocument.model_validate(data)
    except pydantic.ValidationError as e:
        raise exceptions.GraphDocumentError(f"Invalid graph document {source}: {e}") from e
    return document.to_graph()


def load_graph(path: pathlib.Path) -> Graph:
    """Read a YAML or JSON graph document.

    Raises:
        GraphDocumentError: The file is missing, unreadable, or malformed.
    """
    try:
        yaml = ruamel.yaml.YAML(typ="safe")
        with path.open() as f:
            data = yaml.load(f)
    except FileNotFoundError:
        raise exceptions.GraphDocumentError(f"Graph document not found: {path}") from None
    except ruamel.yaml.YAMLError as e:
        raise exceptions.GraphDocumentError(f"Invalid YAML/JSON in {path}: {e}") from e
    except OSError as e:
        raise exceptions.GraphDocumentError(f"Error reading {path}: {e}") from e

    graph = parse_graph(data, str(path))
    logger.debug(f"Loaded {graph!r} from {path}")
    return graph
