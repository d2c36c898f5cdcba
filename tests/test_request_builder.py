"""Unit tests for execution request assembly."""

import json
from dataclasses import FrozenInstanceError

import pytest

from scandium_runner.config import Config, ConfigurationError
from scandium_runner.request_builder import (
    ExecutionRequest,
    build_execution_request,
    request_from_config,
)


class TestRequiredFields:
    """project_id and suite_id must be present."""

    def test_missing_project_id_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_execution_request(project_id="", suite_id="s1")
        assert "project_id" in str(exc_info.value)

    def test_missing_suite_id_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            build_execution_request(project_id="p1", suite_id=None)
        assert "suite_id" in str(exc_info.value)

    def test_whitespace_only_counts_as_missing(self):
        """Both fields are reported together."""
        with pytest.raises(ConfigurationError) as exc_info:
            build_execution_request(project_id="  ", suite_id=" ")
        message = str(exc_info.value)
        assert "project_id" in message
        assert "suite_id" in message


class TestPayloadShape:
    """Defaults and the constant strategy."""

    def test_defaults(self):
        payload = build_execution_request("p1", "s1").to_payload()
        assert payload == {
            "project_id": "p1",
            "suite_id": "s1",
            "browser": "chrome",
            "screenshot": True,
            "strategy": "callback",
            "variables": {},
            "retry": 0,
        }

    def test_explicit_values_kept_exactly(self):
        request = build_execution_request(
            "p1",
            "s1",
            browser="firefox",
            screenshot=False,
            variables={"user": "qa", "count": 2},
            retry=3,
            hub_url="http://hub:4444/wd/hub",
            starting_url="https://example.com/login",
        )
        payload = request.to_payload()
        assert payload["browser"] == "firefox"
        assert payload["screenshot"] is False
        assert payload["variables"] == {"user": "qa", "count": 2}
        assert payload["retry"] == 3
        assert payload["hub_url"] == "http://hub:4444/wd/hub"
        assert payload["starting_url"] == "https://example.com/login"

    def test_to_json_is_valid_json(self):
        body = build_execution_request("p1", "s1", starting_url="https://x.test").to_json()
        assert json.loads(body)["starting_url"] == "https://x.test"


class TestOptionalFieldsOmitted:
    """Unset optional fields never appear as keys."""

    @pytest.mark.parametrize("value", [None, "", "null", "  "])
    def test_hub_url_absent(self, value):
        payload = build_execution_request("p1", "s1", hub_url=value).to_payload()
        assert "hub_url" not in payload

    @pytest.mark.parametrize("value", [None, "", "null"])
    def test_starting_url_absent(self, value):
        payload = build_execution_request("p1", "s1", starting_url=value).to_payload()
        assert "starting_url" not in payload

    def test_no_null_values_in_payload(self):
        payload = build_execution_request("p1", "s1").to_payload()
        assert None not in payload.values()


class TestImmutability:
    def test_request_is_frozen(self):
        request = build_execution_request("p1", "s1")
        with pytest.raises(FrozenInstanceError):
            request.browser = "safari"

    def test_caller_variables_not_shared(self):
        variables = {"a": 1}
        request = build_execution_request("p1", "s1", variables=variables)
        variables["b"] = 2
        assert request.variables == {"a": 1}


class TestFromConfig:
    def test_uses_config_values(self, tmp_path):
        config = Config(
            api_token="t",
            project_id="p9",
            suite_id="s9",
            browser="edge",
            retry=1,
            hub_url="http://grid",
            results_dir=tmp_path,
        )
        request = request_from_config(config)
        assert isinstance(request, ExecutionRequest)
        assert request.project_id == "p9"
        assert request.suite_id == "s9"
        assert request.browser == "edge"
        assert request.to_payload()["hub_url"] == "http://grid"
        assert "starting_url" not in request.to_payload()
