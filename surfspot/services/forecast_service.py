# surfspot/services/forecast_service.py
import logging
from datetime import timedelta
from typing import Optional

import requests
from flask import Flask

from surfspot.models.spot import ForecastSnapshot
from surfspot.utils.datetime_utils import DateTimeUtils

FORECAST_PARAMS = [
    "waveHeight",
    "wavePeriod",
    "windSpeed",
    "windDirection",
    "swellDirection",
    "waterTemperature",
]

class ForecastService:
    """
    외부 해양 예보 API(Stormglass) 연동을 담당하는 서비스 클래스.
    좌표 하나에 대해 '지금부터 N일 후까지'의 예보를 조회하여 스냅샷으로 반환합니다.
    모든 실패는 이 경계에서 None으로 흡수되며, 호출자에게 예외가 전파되지 않습니다.
    """

    def __init__(self, api_key: Optional[str] = None,
                 api_url: str = "https://api.stormglass.io/v2/weather/point",
                 source: str = "noaa",
                 forecast_days: int = 3):
        self.api_key = api_key
        self.api_url = api_url
        self.source = source
        self.forecast_days = forecast_days

    def init_app(self, app: Flask):
        """
        Flask 앱 초기화 과정에서 호출되어 예보 API 설정을 읽어옵니다.
        API 키가 없어도 앱은 정상 기동하며, 예보 조회만 건너뜁니다.
        """
        self.api_key = app.config.get('STORMGLASS_API_KEY')
        self.api_url = app.config.get('STORMGLASS_API_URL', self.api_url)
        self.source = app.config.get('STORMGLASS_SOURCE', self.source)
        self.forecast_days = app.config.get('FORECAST_DAYS', self.forecast_days)
        if not self.api_key:
            logging.warning("ForecastService: STORMGLASS_API_KEY가 설정되지 않아 예보 조회가 비활성화됩니다.")
        else:
            logging.info("ForecastService: Stormglass 예보 서비스가 초기화되었습니다.")

    def fetch_forecast(self, lat: float, lng: float) -> Optional[ForecastSnapshot]:
        """
        주어진 좌표의 예보를 조회합니다.

        :param lat: 위도
        :param lng: 경도
        :return: 성공 시 ForecastSnapshot, 실패 시(키 없음, 비정상 응답, 네트워크/파싱 오류) None
        """
        try:
            if not self.api_key:
                logging.warning("Stormglass API key not found")
                return None

            start_time = DateTimeUtils.now()
            end_time = start_time + timedelta(days=self.forecast_days)

            response = requests.get(
                self.api_url,
                params={
                    "lat": lat,
                    "lng": lng,
                    "params": ",".join(FORECAST_PARAMS),
                    "source": self.source,
                    "start": DateTimeUtils.to_iso_string(start_time),
                    "end": DateTimeUtils.to_iso_string(end_time),
                },
                headers={"Authorization": self.api_key},
            )
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, dict):
                raise ValueError(f"Unexpected forecast payload type: {type(payload).__name__}")

            fetched_at = DateTimeUtils.now()
            return ForecastSnapshot(captured_at=fetched_at, payload=payload, last_fetched=fetched_at)

        except Exception as e:
            logging.error(f"Error fetching forecast data (lat: {lat}, lng: {lng}): {e}", exc_info=True)
            return None


def log_forecast_api_usage(action: str, spot_id: str, success: bool) -> None:
    """예보 API 사용 내역을 모니터링용으로 기록합니다."""
    timestamp = DateTimeUtils.to_iso_string(DateTimeUtils.now())
    logging.info(f"[FORECAST API] {timestamp} | Action: {action} | Spot: {spot_id} | Success: {success}")
