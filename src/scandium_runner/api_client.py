"""Scandium API client for suite execution and status polling."""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from scandium_runner.config import Config
from scandium_runner.constants import (
    CACHE_BUSTING_HEADERS,
    DEFAULT_BASE_URL,
    DEFAULT_REQUEST_TIMEOUT_S,
    EXECUTE_PATH,
    EXECUTIONS_PATH,
    TOKEN_HEADER,
)
from scandium_runner.execution_state import ExecutionStatus
from scandium_runner.request_builder import ExecutionRequest


class ScandiumClientError(Exception):
    """Error from Scandium client operations."""

    def __init__(self, message: str, stage: Optional[str] = None, handle: Optional[str] = None):
        super().__init__(message)
        self.stage = stage
        self.handle = handle


class NetworkError(ScandiumClientError):
    """The HTTP call could not be completed."""
    pass


class ProtocolError(ScandiumClientError):
    """The service answered with something other than the expected JSON."""
    pass


def parse_json_body(text: str, stage: str, handle: Optional[str] = None) -> Any:
    """Parse a response body, raising ProtocolError when it is not well-formed JSON."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        target = f" for execution ID {handle}" if handle else ""
        raise ProtocolError(
            f"Received invalid JSON response{target}: {text[:200]!r}",
            stage=stage,
            handle=handle,
        )


def extract_execution_ids(data: Any) -> List[str]:
    """
    Extract execution ids from an execute response.

    Order is preserved; duplicate ids are collapsed.

    Raises:
        ProtocolError: If the response carries no execution ids.
    """
    executions = data.get("executions") if isinstance(data, dict) else None
    if not isinstance(executions, list):
        executions = []

    handles: List[str] = []
    for item in executions:
        if not isinstance(item, dict):
            continue
        execution_id = item.get("execution_id")
        if execution_id is None or str(execution_id) == "":
            continue
        handle = str(execution_id)
        if handle not in handles:
            handles.append(handle)

    if not handles:
        raise ProtocolError(
            f"No execution IDs found in the response: {json.dumps(data)[:200]}",
            stage="submission",
        )
    return handles


@dataclass
class SubmissionResult:
    """Execution ids extracted from an execute response."""
    handles: List[str]
    raw: str


class ScandiumClient:
    """Scandium suites API client.

    Opens a short-lived httpx client per request. A custom transport can be
    passed in for tests (httpx.MockTransport).
    """

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT_S,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_token:
            raise ScandiumClientError("API_TOKEN is required.")
        self.api_token = api_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            TOKEN_HEADER: self.api_token,
        }
        if extra:
            headers.update(extra)
        return headers

    def _make_request(
        self,
        method: str,
        path: str,
        stage: str,
        handle: Optional[str] = None,
        **kwargs,
    ) -> httpx.Response:
        """Make one HTTP request, mapping transport failures to NetworkError."""
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(method, f"{self.base_url}{path}", **kwargs)
        except httpx.TimeoutException:
            raise NetworkError(
                f"Request to {path} timed out after {self.timeout}s",
                stage=stage,
                handle=handle,
            )
        except httpx.RequestError as e:
            raise NetworkError(f"Network error: {e}", stage=stage, handle=handle)

        if response.status_code >= 400:
            raise ProtocolError(
                f"API error {response.status_code} from {path}: {response.text[:200]!r}",
                stage=stage,
                handle=handle,
            )
        return response

    def execute_suite(self, request: ExecutionRequest) -> SubmissionResult:
        """
        Submit a suite execution request.

        Returns:
            SubmissionResult with the ordered execution ids and the raw body.

        Raises:
            NetworkError: If the HTTP call cannot be completed.
            ProtocolError: On invalid JSON, an HTTP error status, or no execution ids.
        """
        response = self._make_request(
            "POST",
            EXECUTE_PATH,
            stage="submission",
            headers=self._headers(),
            content=request.to_json(),
        )
        data = parse_json_body(response.text, stage="submission")
        return SubmissionResult(handles=extract_execution_ids(data), raw=response.text)

    def get_execution(self, handle: str, project_id: str) -> ExecutionStatus:
        """
        Query the current status of one execution.

        Raises:
            NetworkError: If the HTTP call cannot be completed.
            ProtocolError: On invalid JSON or an HTTP error status.
        """
        response = self._make_request(
            "GET",
            EXECUTIONS_PATH,
            stage="polling",
            handle=handle,
            headers=self._headers(CACHE_BUSTING_HEADERS),
            params={"execution_id": handle, "project_id": project_id},
        )
        data = parse_json_body(response.text, stage="polling", handle=handle)

        details = data.get("data") if isinstance(data, dict) else None
        if not isinstance(details, dict):
            details = {}

        return ExecutionStatus(
            handle=handle,
            running_status=details.get("running_status"),
            status=details.get("status"),
            raw=response.text,
        )


def get_scandium_client(config: Config) -> ScandiumClient:
    """Get a client for the configured service."""
    return ScandiumClient(
        api_token=config.api_token,
        base_url=config.base_url,
        timeout=config.request_timeout,
    )
