from typing import Annotated

import pydantic


class SolverConfig(pydantic.BaseModel):
    """Limits and tolerances used by the reference algorithms."""

    weight_tolerance: Annotated[float, pydantic.Field(ge=0)] = 1e-9
    max_trails: Annotated[int, pydantic.Field(gt=0)] = 10_000
    max_odd_vertices: Annotated[int, pydantic.Field(gt=0)] = 14

    @pydantic.field_validator("max_odd_vertices")
    @classmethod
    def validate_max_odd_vertices(cls, v: int) -> int:
        """Odd vertex sets always have even size."""
        if v % 2 == 1:
            raise ValueError("max_odd_vertices must be even")
        return v


class DisplayConfig(pydantic.BaseModel):
    """Display formatting configuration."""

    precision: Annotated[int, pydantic.Field(ge=0)] = 5


class GraphTutorConfig(pydantic.BaseModel):
    """Complete graphtutor configuration schema."""

    model_config = pydantic.ConfigDict(extra="forbid")

    solver: SolverConfig = pydantic.Field(default_factory=SolverConfig)
    display: DisplayConfig = pydantic.Field(default_factory=DisplayConfig)
    metrics: bool = False

    @classmethod
    def get_default(cls) -> "GraphTutorConfig":
        """Return config with all defaults."""
        return cls()
