"""FastAPI dependency injection for planner services."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from layoutplanner.application.config import PlannerConfiguration, load_config

# Path of a configuration file providing the server defaults
CONFIG_ENV_VAR = "LAYOUTPLANNER_CONFIG"


@lru_cache(maxsize=1)
def get_base_config() -> PlannerConfiguration:
    """Get the cached server default configuration.

    Loaded from the file named by ``LAYOUTPLANNER_CONFIG`` when set,
    otherwise the built-in defaults.
    """
    path = os.environ.get(CONFIG_ENV_VAR)
    if path:
        return load_config(Path(path))
    return PlannerConfiguration()


# Type aliases for cleaner endpoint signatures
BaseConfigDep = Annotated[PlannerConfiguration, Depends(get_base_config)]
