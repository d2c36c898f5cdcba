"""Shared fixtures: an in-memory Scandium service behind httpx.MockTransport."""

import json
from pathlib import Path

import httpx
import pytest

from scandium_runner.api_client import ScandiumClient
from scandium_runner.config import Config


BASE_URL = "https://scandium.test"


def status_body(running_status, status=None, execution_id=None) -> str:
    data = {"running_status": running_status, "status": status}
    if execution_id is not None:
        data["execution_id"] = execution_id
    return json.dumps({"data": data})


class FakeScandium:
    """Scripted responses for the execute and executions endpoints.

    status_script maps an execution id to the bodies returned on successive
    polls; the last body repeats once the script runs out.
    """

    def __init__(self):
        self.execute_body = json.dumps({"executions": []})
        self.execute_status = 200
        self.status_script = {}
        self.status_code = 200
        self.requests = []

    def executions(self, *ids):
        self.execute_body = json.dumps(
            {"executions": [{"execution_id": i} for i in ids]}
        )

    def script(self, execution_id, *bodies):
        self.status_script[execution_id] = list(bodies)

    def polls(self, execution_id=None):
        polls = [r for r in self.requests if r.method == "GET"]
        if execution_id is None:
            return polls
        return [r for r in polls if r.url.params.get("execution_id") == execution_id]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "POST" and request.url.path == "/suites/execute":
            return httpx.Response(self.execute_status, text=self.execute_body)

        if request.method == "GET" and request.url.path == "/suites/executions":
            execution_id = request.url.params["execution_id"]
            bodies = self.status_script[execution_id]
            body = bodies.pop(0) if len(bodies) > 1 else bodies[0]
            return httpx.Response(self.status_code, text=body)

        return httpx.Response(404, text=json.dumps({"message": "not found"}))


@pytest.fixture
def service():
    return FakeScandium()


@pytest.fixture
def client(service):
    return ScandiumClient(
        api_token="test-token",
        base_url=BASE_URL,
        transport=httpx.MockTransport(service.handler),
    )


@pytest.fixture
def config(tmp_path: Path):
    return Config(
        api_token="test-token",
        project_id="proj-1",
        suite_id="suite-1",
        base_url=BASE_URL,
        max_attempts=3,
        wait_period=0,
        results_dir=tmp_path,
    )


class SleepRecorder:
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def sleeper():
    return SleepRecorder()
