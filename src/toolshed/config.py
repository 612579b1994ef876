from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


@dataclass(frozen=True)
class Settings:
    # Knowledge-base JSON. Relative paths resolve against the working directory at load time.
    data_path: str = os.getenv("TOOLSHED_DATA_PATH", "../bambisleep_data/bambisleep_structured.json")

    log_level: str = os.getenv("TOOLSHED_LOG_LEVEL", "INFO")

    # Default for `toolshed search`.
    max_results: int = int(os.getenv("TOOLSHED_MAX_RESULTS", "5"))
