from graphtutor.config.io import (
    clear_config_cache,
    get_display_precision,
    get_merged_config,
    get_solver_config,
    load_config,
    override_config,
)
from graphtutor.config.models import DisplayConfig, GraphTutorConfig, SolverConfig

__all__ = [
    "DisplayConfig",
    "GraphTutorConfig",
    "SolverConfig",
    "clear_config_cache",
    "get_display_precision",
    "get_merged_config",
    "get_solver_config",
    "load_config",
    "override_config",
]
