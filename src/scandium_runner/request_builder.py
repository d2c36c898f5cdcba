"""Execution request body for the suite execute endpoint."""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from scandium_runner.config import Config, ConfigurationError, optional_value
from scandium_runner.constants import (
    DEFAULT_BROWSER,
    DEFAULT_RETRY,
    DEFAULT_SCREENSHOT,
    EXECUTION_STRATEGY,
)


@dataclass(frozen=True)
class ExecutionRequest:
    """A suite execution request. Built once, never mutated."""

    project_id: str
    suite_id: str
    browser: str = DEFAULT_BROWSER
    screenshot: bool = DEFAULT_SCREENSHOT
    variables: Dict[str, Any] = field(default_factory=dict)
    retry: int = DEFAULT_RETRY
    hub_url: Optional[str] = None
    starting_url: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize to the JSON body. Unset optional fields are omitted, never null."""
        payload: Dict[str, Any] = {
            "project_id": self.project_id,
            "suite_id": self.suite_id,
            "browser": self.browser,
            "screenshot": self.screenshot,
            "strategy": EXECUTION_STRATEGY,
            "variables": self.variables,
            "retry": self.retry,
        }

        if self.hub_url is not None:
            payload["hub_url"] = self.hub_url
        if self.starting_url is not None:
            payload["starting_url"] = self.starting_url

        return payload

    def to_json(self) -> str:
        return json.dumps(self.to_payload())


def build_execution_request(
    project_id: Optional[str],
    suite_id: Optional[str],
    browser: str = DEFAULT_BROWSER,
    screenshot: bool = DEFAULT_SCREENSHOT,
    variables: Optional[Dict[str, Any]] = None,
    retry: int = DEFAULT_RETRY,
    hub_url: Optional[str] = None,
    starting_url: Optional[str] = None,
) -> ExecutionRequest:
    """
    Assemble an ExecutionRequest from required and optional parameters.

    Raises:
        ConfigurationError: If project_id or suite_id is empty or unset.
    """
    missing = []
    if not project_id or not project_id.strip():
        missing.append("project_id")
    if not suite_id or not suite_id.strip():
        missing.append("suite_id")
    if missing:
        raise ConfigurationError(
            f"Execution request missing required field(s): {', '.join(missing)}"
        )

    return ExecutionRequest(
        project_id=project_id.strip(),
        suite_id=suite_id.strip(),
        browser=browser or DEFAULT_BROWSER,
        screenshot=screenshot,
        variables=dict(variables) if variables else {},
        retry=retry,
        hub_url=optional_value(hub_url),
        starting_url=optional_value(starting_url),
    )


def request_from_config(config: Config) -> ExecutionRequest:
    """Build the execution request for a loaded configuration."""
    return build_execution_request(
        project_id=config.project_id,
        suite_id=config.suite_id,
        browser=config.browser,
        screenshot=config.screenshot,
        variables=config.variables,
        retry=config.retry,
        hub_url=config.hub_url,
        starting_url=config.starting_url,
    )
