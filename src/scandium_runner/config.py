"""Configuration loading for the Scandium suite runner."""

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml
from dotenv import load_dotenv

from scandium_runner.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_BROWSER,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_REQUEST_TIMEOUT_S,
    DEFAULT_RETRY,
    DEFAULT_SCREENSHOT,
    DEFAULT_VARIABLES,
    DEFAULT_WAIT_PERIOD_S,
)


_TRUE_VALUES = {"true", "1", "yes", "on"}
_FALSE_VALUES = {"false", "0", "no", "off"}


@dataclass
class Config:
    """Runner configuration loaded from a run file and the environment."""

    api_token: str
    project_id: str
    suite_id: str = ""
    base_url: str = DEFAULT_BASE_URL
    browser: str = DEFAULT_BROWSER
    screenshot: bool = DEFAULT_SCREENSHOT
    variables: Dict[str, Any] = field(default_factory=dict)
    retry: int = DEFAULT_RETRY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    wait_period: float = DEFAULT_WAIT_PERIOD_S
    hub_url: Optional[str] = None
    starting_url: Optional[str] = None
    results_dir: Path = Path(".")
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT_S


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


def optional_value(value: Optional[str]) -> Optional[str]:
    """Normalize an optional setting: empty strings and the literal "null" mean unset."""
    if value is None:
        return None
    value = str(value).strip()
    if not value or value.lower() == "null":
        return None
    return value


def load_run_file(path: Path) -> Dict[str, str]:
    """
    Load base settings from a YAML or JSON run file.

    Keys use the environment variable names in lower case
    (e.g. ``project_id``, ``max_attempts``).
    """
    if not path.exists():
        raise ConfigurationError(f"Run file not found: {path}")

    content = path.read_text()

    try:
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        elif path.suffix == ".json":
            data = json.loads(content)
        else:
            raise ConfigurationError(
                f"Unsupported run file type: {path.suffix}. Use .yaml, .yml, or .json"
            )
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not parse run file {path}: {e}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Run file {path} must contain a mapping")

    settings = {}
    for key, value in data.items():
        if value is None:
            continue
        # Nested structures (variables) are kept as JSON text, like the env form
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        elif isinstance(value, bool):
            value = "true" if value else "false"
        settings[str(key).upper()] = str(value)
    return settings


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be true or false, got {value!r}")


def _parse_int(name: str, value: str, minimum: int) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    if parsed < minimum:
        raise ConfigurationError(f"{name} must be >= {minimum}, got {parsed}")
    return parsed


def _parse_seconds(name: str, value: str, allow_zero: bool = True) -> float:
    try:
        parsed = float(value.strip())
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got {value!r}")
    if parsed < 0 or (parsed == 0 and not allow_zero):
        raise ConfigurationError(f"{name} must be a positive number of seconds, got {parsed}")
    return parsed


def _parse_variables(value: str) -> Dict[str, Any]:
    if not value.strip():
        value = DEFAULT_VARIABLES
    try:
        variables = json.loads(value)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"VARIABLES must be a JSON object: {e}")
    if not isinstance(variables, dict):
        raise ConfigurationError("VARIABLES must be a JSON object")
    return variables


def load_config(
    run_file: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    require_suite: bool = True,
) -> Config:
    """
    Load configuration from an optional run file and environment variables.

    Environment variables override values from the run file.

    Args:
        run_file: Optional YAML/JSON file with base settings.
        environ: Mapping to read instead of os.environ (tests).
        require_suite: If False, SUITE_ID may be missing (status/wait commands).

    Returns:
        A validated Config.

    Raises:
        ConfigurationError: If required settings are missing or malformed.
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    settings: Dict[str, str] = {}
    if run_file is not None:
        settings.update(load_run_file(run_file))
    settings.update({k: v for k, v in environ.items() if v != ""})

    def get(name: str, default: str = "") -> str:
        return settings.get(name, default)

    required = ["API_TOKEN", "PROJECT_ID"]
    if require_suite:
        required.append("SUITE_ID")

    missing: List[str] = [name for name in required if not get(name).strip()]
    if missing:
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}\n"
            f"Set them as environment variables, in a .env file, or in a run file."
        )

    base_url = get("BASE_URL", DEFAULT_BASE_URL).strip() or DEFAULT_BASE_URL

    return Config(
        api_token=get("API_TOKEN").strip(),
        project_id=get("PROJECT_ID").strip(),
        suite_id=get("SUITE_ID").strip(),
        base_url=base_url.rstrip("/"),
        browser=get("BROWSER", DEFAULT_BROWSER).strip() or DEFAULT_BROWSER,
        screenshot=_parse_bool("SCREENSHOT", get("SCREENSHOT", str(DEFAULT_SCREENSHOT))),
        variables=_parse_variables(get("VARIABLES", DEFAULT_VARIABLES)),
        retry=_parse_int("RETRY", get("RETRY", str(DEFAULT_RETRY)), minimum=0),
        max_attempts=_parse_int(
            "MAX_ATTEMPTS", get("MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS)), minimum=1
        ),
        wait_period=_parse_seconds(
            "WAIT_PERIOD", get("WAIT_PERIOD", str(DEFAULT_WAIT_PERIOD_S))
        ),
        hub_url=optional_value(get("HUB_URL") or None),
        starting_url=optional_value(get("STARTING_URL") or None),
        results_dir=Path(get("RESULTS_DIR", ".").strip() or "."),
        request_timeout=_parse_seconds(
            "REQUEST_TIMEOUT",
            get("REQUEST_TIMEOUT", str(DEFAULT_REQUEST_TIMEOUT_S)),
            allow_zero=False,
        ),
    )
