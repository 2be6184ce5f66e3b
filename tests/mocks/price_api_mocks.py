import json
from unittest.mock import Mock

import requests

# 2024-01-01T00:00:00Z, 2024-01-01T23:00:00Z, 2024-01-02T00:00:00Z
JAN_1_MS = 1704067200000
JAN_1_LATE_MS = JAN_1_MS + 23 * 3600 * 1000
JAN_2_MS = 1704153600000


def mock_successful_response(*args, **kwargs):
    """
    Mocked market_chart response with two days of prices.
    """
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.json.return_value = {
        "prices": [[JAN_1_MS, 42000.0], [JAN_2_MS, 43000.0]],
        "market_caps": [],
        "total_volumes": [],
    }
    mock_resp.raise_for_status = Mock()
    return mock_resp


def mock_http_error_response(*args, **kwargs):
    """
    Mocked API response that raises HTTPError (4xx or 5xx).
    """
    mock_resp = Mock()
    mock_resp.raise_for_status.side_effect = requests.exceptions.HTTPError("429 Too Many Requests")
    return mock_resp


def mock_timeout(*args, **kwargs):
    """
    Mocked scenario where the API call times out.
    """
    raise requests.exceptions.Timeout("Read timed out")


def mock_malformed_json_response(*args, **kwargs):
    """
    Mocked response with invalid JSON content.
    """
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.raise_for_status = Mock()
    mock_resp.json.side_effect = json.JSONDecodeError("Expecting value", "", 0)
    return mock_resp


def mock_missing_prices_response(*args, **kwargs):
    """
    Mocked response whose payload has no 'prices' key.
    """
    mock_resp = Mock()
    mock_resp.status_code = 200
    mock_resp.raise_for_status = Mock()
    mock_resp.json.return_value = {"error": "coin not found"}
    return mock_resp
