"""
Configuration for the compliance dashboard core.

Values come from the environment (.env is loaded) and an optional YAML
settings file. Environment wins over YAML, YAML over defaults.
"""

import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from datetime import timedelta
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Paths
DATA_DIR = Path(os.environ.get("COMPLIANCE_DATA_DIR", "data"))
SETTINGS_FILE = Path(os.environ.get("COMPLIANCE_SETTINGS", "compliance.yaml"))


@dataclass
class Settings:
    """Tunable behaviour. Defaults match the dashboard."""
    data_dir: Path = DATA_DIR
    session_ttl_minutes: int = 480
    upcoming_window_days: int = 14
    compliance_target: int = 85
    lookup_delay_seconds: float = 0.0  # Demo status source only

    @property
    def session_ttl(self) -> timedelta:
        return timedelta(minutes=self.session_ttl_minutes)


ENV_OVERRIDES = {
    "data_dir": "COMPLIANCE_DATA_DIR",
    "session_ttl_minutes": "COMPLIANCE_SESSION_TTL_MINUTES",
    "upcoming_window_days": "COMPLIANCE_UPCOMING_DAYS",
    "compliance_target": "COMPLIANCE_TARGET",
    "lookup_delay_seconds": "COMPLIANCE_LOOKUP_DELAY",
}


def load_settings_file(path: Path = None) -> dict:
    """Load settings from YAML. Missing file means no overrides."""
    path = path or SETTINGS_FILE
    if not path.exists():
        return {}
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        print(f"[WARN] Ignoring {path}: expected a mapping")
        return {}
    return data


def load_settings(path: Path = None) -> Settings:
    """Build Settings from defaults, YAML, then environment."""
    values = {}
    known = {f.name: f for f in fields(Settings)}

    for key, value in load_settings_file(path).items():
        if key in known:
            values[key] = value
        else:
            print(f"[WARN] Unknown setting: {key}")

    for key, env_key in ENV_OVERRIDES.items():
        if env_key in os.environ:
            values[key] = os.environ[env_key]

    # Coerce to the declared types
    settings = Settings()
    for key, value in values.items():
        default = getattr(settings, key)
        if isinstance(default, Path):
            value = Path(value)
        elif isinstance(default, bool):
            value = str(value).lower() in ("1", "true", "yes")
        elif isinstance(default, int):
            value = int(value)
        elif isinstance(default, float):
            value = float(value)
        setattr(settings, key, value)

    return settings
