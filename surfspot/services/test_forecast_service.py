# surfspot/services/test_forecast_service.py
"""
Stormglass 예보 클라이언트 테스트 (requests_mock 사용)

사용법: python -m pytest surfspot/services/test_forecast_service.py -v
"""

import logging
from datetime import datetime, timedelta

import pytest
import requests

from surfspot.models.spot import ForecastSnapshot
from surfspot.services.forecast_service import ForecastService, FORECAST_PARAMS, log_forecast_api_usage

API_URL = 'https://api.stormglass.io/v2/weather/point'
PAYLOAD = {"hours": [{"time": "2026-01-01T00:00:00+00:00", "waveHeight": {"noaa": 1.2}}], "meta": {"cost": 1}}

@pytest.fixture
def service():
    return ForecastService(api_key="secret-key", api_url=API_URL)

def _parse_iso(value):
    # requests_mock은 쿼리 문자열을 소문자로 돌려줍니다.
    return datetime.fromisoformat(value.upper().replace('Z', '+00:00'))

def test_fetch_forecast_success(service, requests_mock):
    requests_mock.get(API_URL, json=PAYLOAD)

    snapshot = service.fetch_forecast(21.66, -158.05)

    assert isinstance(snapshot, ForecastSnapshot)
    assert snapshot.payload == PAYLOAD
    assert snapshot.captured_at == snapshot.last_fetched
    assert snapshot.captured_at.tzinfo is not None

def test_fetch_forecast_request_shape(service, requests_mock):
    requests_mock.get(API_URL, json=PAYLOAD)

    service.fetch_forecast(21.66, -158.05)

    request = requests_mock.last_request
    assert request.headers["Authorization"] == "secret-key"
    assert request.qs["lat"] == ["21.66"]
    assert request.qs["lng"] == ["-158.05"]
    assert request.qs["source"] == ["noaa"]
    assert request.qs["params"] == [",".join(FORECAST_PARAMS).lower()]
    start, end = _parse_iso(request.qs["start"][0]), _parse_iso(request.qs["end"][0])
    assert end - start == timedelta(days=3)

def test_missing_api_key_returns_none_without_request(requests_mock):
    service = ForecastService(api_key=None, api_url=API_URL)
    assert service.fetch_forecast(1.0, 2.0) is None
    assert not requests_mock.called

@pytest.mark.parametrize("status_code", [400, 401, 402, 429, 500, 503])
def test_non_success_status_returns_none(service, requests_mock, status_code):
    requests_mock.get(API_URL, status_code=status_code, json={"errors": {"key": "Invalid"}})
    assert service.fetch_forecast(1.0, 2.0) is None

def test_network_error_returns_none(service, requests_mock):
    requests_mock.get(API_URL, exc=requests.exceptions.ConnectionError)
    assert service.fetch_forecast(1.0, 2.0) is None

def test_malformed_body_returns_none(service, requests_mock):
    requests_mock.get(API_URL, text="<html>gateway</html>")
    assert service.fetch_forecast(1.0, 2.0) is None

def test_non_object_body_returns_none(service, requests_mock):
    requests_mock.get(API_URL, json=[1, 2, 3])
    assert service.fetch_forecast(1.0, 2.0) is None

def test_init_app_reads_config(app):
    service = ForecastService()
    service.init_app(app)
    assert service.api_key == "test-stormglass-key"
    assert service.source == "noaa"
    assert service.forecast_days == 3

def test_log_forecast_api_usage(caplog):
    caplog.set_level(logging.INFO)
    log_forecast_api_usage("create", "spot-1", True)
    assert "[FORECAST API]" in caplog.text
    assert "Action: create | Spot: spot-1 | Success: True" in caplog.text
