"""Constants for the Scandium suite runner."""

DEFAULT_BASE_URL = "https://scr.getscandium.com"

EXECUTE_PATH = "/suites/execute"
EXECUTIONS_PATH = "/suites/executions"

DEFAULT_BROWSER = "chrome"
DEFAULT_SCREENSHOT = True
DEFAULT_VARIABLES = "{}"
DEFAULT_RETRY = 0
DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_WAIT_PERIOD_S = 120.0
DEFAULT_REQUEST_TIMEOUT_S = 30.0

# Fixed for every suite execution request
EXECUTION_STRATEGY = "callback"

# running_status values
RUNNING_STATUS_COMPLETED = "completed"

# status values
STATUS_ERROR = "error"

# Aggregate results
PASSED = "PASSED"
FAILED = "FAILED"
TIMEOUT = "TIMEOUT"

TOKEN_HEADER = "x-api-token"

# Status responses must never come from an intermediary cache
CACHE_BUSTING_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}

SUMMARY_MARKER_FILE = "test_result.txt"
EXECUTION_RESULT_TEMPLATE = "execution_result_{handle}.json"

# Raw response bodies are only echoed when this environment variable is set
DEBUG_ENV_VAR = "SCANDIUM_DEBUG"
