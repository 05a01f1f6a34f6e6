# campus_nav/io/config.py
from pathlib import Path

from campus_nav.config.models import ScenarioModel


def load_scenario(path: str | Path) -> ScenarioModel:
    """Validate a JSON scenario file; relative paths inside it stay relative to the cwd."""
    return ScenarioModel.model_validate_json(Path(path).read_text(encoding="utf-8"))
