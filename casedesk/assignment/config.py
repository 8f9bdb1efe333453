"""
Capacity configuration for the assignment engine.

Values come from the environment (loaded from .env at the project root):
- MAX_ACTIVE_CASES_PER_AGENT: concurrent active cases per agent (default 20)
- LIMITED_UTILIZATION_THRESHOLD: utilization % at which an agent is "limited" (default 80)
"""

import os
from pathlib import Path
from dotenv import load_dotenv

project_root = Path(__file__).parent.parent.parent
load_dotenv(project_root / ".env")


def _positive_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


# Maximum number of active cases an agent can handle concurrently
MAX_ACTIVE_CASES_PER_AGENT = _positive_int("MAX_ACTIVE_CASES_PER_AGENT", 20)

LIMITED_UTILIZATION_THRESHOLD = float(os.getenv("LIMITED_UTILIZATION_THRESHOLD", "80"))
