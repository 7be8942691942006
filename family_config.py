from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_UPWARD_LEVELS = 2
DEFAULT_DOWNWARD_LEVELS = 2
DEFAULT_TITLE = "Family Hierarchy"


@dataclass(frozen=True)
class Settings:
    graphviz_api_url: str = ""
    family_data_url: str = ""
    log_level: str = "INFO"
    title: str = DEFAULT_TITLE
    default_upward_levels: int = DEFAULT_UPWARD_LEVELS
    default_downward_levels: int = DEFAULT_DOWNWARD_LEVELS


def _non_negative(value: Any, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a non-negative integer, got {value!r}")
    if number < 0:
        raise ValueError(f"{key} must be a non-negative integer, got {value!r}")
    return number


def load_settings(secrets: Mapping[str, Any]) -> Settings:
    """Build Settings from st.secrets (or any mapping); missing keys use defaults."""
    return Settings(
        graphviz_api_url=str(secrets.get("GRAPHVIZ_API_URL", "") or "").strip(),
        family_data_url=str(secrets.get("FAMILY_DATA_URL", "") or "").strip(),
        log_level=str(secrets.get("LOG_LEVEL", "INFO") or "INFO").upper(),
        title=str(secrets.get("TITLE", DEFAULT_TITLE) or DEFAULT_TITLE),
        default_upward_levels=_non_negative(
            secrets.get("DEFAULT_UPWARD_LEVELS", DEFAULT_UPWARD_LEVELS), "DEFAULT_UPWARD_LEVELS"),
        default_downward_levels=_non_negative(
            secrets.get("DEFAULT_DOWNWARD_LEVELS", DEFAULT_DOWNWARD_LEVELS), "DEFAULT_DOWNWARD_LEVELS"),
    )
