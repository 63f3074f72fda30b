import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.yaml')


@dataclass
class SolverSettings:
    max_solutions: int = 50
    prune_dominated: bool = True
    report_threshold: Optional[int] = None
    strict_rules: bool = True
    update_interval: float = 1.0
    display_limit: int = 10
    show_labels: bool = False

    def __post_init__(self):
        if not isinstance(self.max_solutions, int) or self.max_solutions < 1:
            raise ValueError("max_solutions must be a positive integer")
        if self.report_threshold is not None and (
                not isinstance(self.report_threshold, int) or self.report_threshold < 0):
            raise ValueError("report_threshold must be a non-negative integer or null")
        if not isinstance(self.update_interval, (int, float)) or self.update_interval < 0:
            raise ValueError("update_interval must be a non-negative number of seconds")
        if not isinstance(self.display_limit, int) or self.display_limit < 1:
            raise ValueError("display_limit must be a positive integer")


def load_settings(path: Optional[str] = None) -> SolverSettings:
    """Load solver settings from YAML; a missing file means defaults."""
    path = path or DEFAULT_SETTINGS_PATH
    if not os.path.exists(path):
        logger.warning("Settings file %s not found, using defaults", path)
        return SolverSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f.read())
    except yaml.YAMLError as e:
        logger.error("YAML parsing error in %s: %s", path, e)
        raise ValueError(f"Failed to load settings: {e}") from e

    if not data:
        logger.info("Empty settings file %s, using defaults", path)
        return SolverSettings()
    if not isinstance(data, dict):
        raise ValueError("Settings file must contain a mapping")

    known = {f.name for f in fields(SolverSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")
    return SolverSettings(**data)


class Config:
    def __init__(self):
        self.discord_token = os.getenv('DISCORD_TOKEN')
        self.owner_id = os.getenv('OWNER_ID')
        self.settings_path = os.getenv('SOLVER_SETTINGS', DEFAULT_SETTINGS_PATH)

        # Validate required environment variables
        if not all([
            self.discord_token,
            self.owner_id
        ]):
            raise ValueError("Missing required environment variables")
        if not self.owner_id.isdigit():
            raise ValueError("OWNER_ID must be a Discord user ID")

        self.settings = load_settings(self.settings_path)
