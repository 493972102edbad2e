"""
Centralized environment variable loader.

This module loads .env files from both the root and backend directories,
ensuring all environment variables are available throughout the project.

Should be called at the start of any entry point, before settings are read.
"""

import logging
from pathlib import Path
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

BACKEND_DIR = Path(__file__).resolve().parent.parent
ROOT_DIR = BACKEND_DIR.parent


def load_env(override: bool = False) -> List[Path]:
    """
    Load environment variables from .env files.

    backend/.env is loaded before root/.env so that, without override,
    backend-specific values win over general ones. Variables already set in
    the process environment are kept unless override is True.

    Returns:
        The .env files that were found and loaded
    """
    loaded = []
    # With override the last file loaded wins, so the order flips
    order = (ROOT_DIR, BACKEND_DIR) if override else (BACKEND_DIR, ROOT_DIR)
    for env_file in (directory / ".env" for directory in order):
        if env_file.exists():
            load_dotenv(env_file, override=override)
            loaded.append(env_file)
            logger.info(f"Loaded environment variables from {env_file}")
    return loaded
