"""Configuration management for ScholarPort."""

import os
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field

from scholarport.models.options import ExportOptions, ExportType, ImportOptions
from scholarport.models.records import FinancialGoalRecord, ScholarshipRecord, StudentProfile
from scholarport.processing.normalizer import FieldNormalizer

# Default paths
DATA_DIR = Path(__file__).parent.parent / "data"
DATA_DIR_ENV = "SCHOLARPORT_DATA_DIR"
PROFILE_FILENAME = "profile.yaml"
SETTINGS_FILENAME = "settings.yaml"
PORTFOLIO_FILENAME = "portfolio.yaml"
LOG_FILENAME = "scholarport.log"


class Settings(BaseModel):
    """Defaults the command line applies when flags are not given."""

    export_type: ExportType = Field(ExportType.PORTFOLIO, description="Default export type")
    export: ExportOptions = Field(default_factory=ExportOptions)
    import_: ImportOptions = Field(default_factory=ImportOptions, alias="import")

    model_config = {"populate_by_name": True}


def get_data_dir() -> Path:
    """Data directory, relocatable through ``SCHOLARPORT_DATA_DIR``."""
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override) if override else DATA_DIR


def ensure_data_dir() -> Path:
    """Ensure the data directory exists."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def log_path() -> Path:
    return get_data_dir() / LOG_FILENAME


def _read_yaml(path: Path) -> Optional[dict]:
    if not path.exists():
        return None

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    return data or None


def _write_yaml(data: dict, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)

    return path


def load_profile(path: Optional[Path] = None) -> StudentProfile:
    """Load the student profile from YAML.

    Args:
        path: Optional path to profile file. Defaults to data/profile.yaml.

    Returns:
        StudentProfile instance. Returns empty profile if file doesn't exist.
    """
    if path is None:
        path = get_data_dir() / PROFILE_FILENAME

    data = _read_yaml(path)
    if data is None:
        return StudentProfile()

    return StudentProfile.model_validate(data)


def save_profile(profile: StudentProfile, path: Optional[Path] = None) -> Path:
    """Save the student profile to YAML.

    Args:
        profile: StudentProfile instance to save.
        path: Optional path to save to. Defaults to data/profile.yaml.

    Returns:
        Path where profile was saved.
    """
    if path is None:
        path = get_data_dir() / PROFILE_FILENAME

    # Excluding None values keeps the YAML short
    return _write_yaml(profile.model_dump(mode="json", exclude_none=True), path)


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load export/import defaults. Missing file yields the built-in defaults."""
    if path is None:
        path = get_data_dir() / SETTINGS_FILENAME

    data = _read_yaml(path)
    if data is None:
        return Settings()

    return Settings.model_validate(data)


def load_portfolio(
    path: Optional[Path] = None,
) -> Tuple[List[ScholarshipRecord], List[FinancialGoalRecord]]:
    """Load tracked scholarships and financial goals.

    Entries go through the normalizer, so hand-edited files may use any of
    the accepted field spellings.

    Args:
        path: Optional path to portfolio file. Defaults to data/portfolio.yaml.

    Returns:
        (scholarships, goals), both empty if the file doesn't exist.
    """
    if path is None:
        path = get_data_dir() / PORTFOLIO_FILENAME

    data = _read_yaml(path)
    if data is None:
        return [], []

    normalizer = FieldNormalizer()
    scholarships = normalizer.normalize_batch(data.get("scholarships") or [])
    goals = [normalizer.normalize_goal(g) for g in data.get("financialGoals") or []]
    return scholarships, goals


def save_portfolio(
    scholarships: List[ScholarshipRecord],
    goals: Optional[List[FinancialGoalRecord]] = None,
    path: Optional[Path] = None,
) -> Path:
    """Save tracked scholarships and financial goals in their wire form.

    Returns:
        Path where the portfolio was saved.
    """
    if path is None:
        path = get_data_dir() / PORTFOLIO_FILENAME

    data = {
        "scholarships": [s.to_wire() for s in scholarships],
        "financialGoals": [g.to_wire() for g in goals or []],
    }
    return _write_yaml(data, path)
