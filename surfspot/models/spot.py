# surfspot/models/spot.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
import logging

from surfspot.utils.datetime_utils import DateTimeUtils

class Difficulty(Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"

class WaveType(Enum):
    BEACH_BREAK = "Beach break"
    REEF_BREAK = "Reef break"
    POINT_BREAK = "Point break"
    RIVER_MOUTH = "River mouth"

class Tide(Enum):
    LOW = "Low"
    MID = "Mid"
    HIGH = "High"
    ALL = "All"

class CrowdFactor(Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

# 문자열로 저장된 값을 Enum으로 되돌릴 때 사용하는 (필드명 -> Enum 클래스, 기본값) 매핑
_ENUM_FIELDS = {
    'difficulty': (Difficulty, Difficulty.INTERMEDIATE),
    'wave_type': (WaveType, WaveType.BEACH_BREAK),
    'tide': (Tide, Tide.ALL),
    'crowd_factor': (CrowdFactor, CrowdFactor.MEDIUM),
}

@dataclass
class Location:
    """스팟 좌표. 저장 기본값은 0이 아닌 None 입니다."""
    lat: Optional[float] = None
    lng: Optional[float] = None

    def has_coordinates(self) -> bool:
        # 0 값은 좌표 없음으로 취급됩니다 (적도/본초자오선 스팟은 예보 조회 대상에서 빠짐).
        return bool(self.lat and self.lng)

@dataclass
class ForecastSnapshot:
    """스팟에 내장되는 예보 스냅샷. 부분 병합 없이 통째로 교체됩니다."""
    captured_at: datetime
    payload: Dict[str, Any]
    last_fetched: datetime

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["ForecastSnapshot"]:
        if not data:
            return None
        data = DateTimeUtils.from_firestore(data)
        return cls(
            captured_at=data.get('captured_at'),
            payload=data.get('payload') or {},
            last_fetched=data.get('last_fetched'),
        )

@dataclass
class SurfSpot:
    """
    Firestore 'spots' 컬렉션의 문서 구조.
    comments 필드는 이 스팟을 참조하는 댓글 ID 목록이며, 댓글 생성/삭제 시 수동으로 동기화됩니다.
    """
    spot_id: str
    name: str
    user_id: str
    description: str = ""
    image_url: str = ""
    region: str = ""
    country: str = ""
    difficulty: Difficulty = Difficulty.INTERMEDIATE
    wave_type: WaveType = WaveType.BEACH_BREAK
    swell_direction: str = ""
    wind_direction: str = ""
    tide: Tide = Tide.ALL
    crowd_factor: CrowdFactor = CrowdFactor.MEDIUM
    season: List[str] = field(default_factory=list)
    location: Location = field(default_factory=Location)
    comments: List[str] = field(default_factory=list)
    forecast: Optional[ForecastSnapshot] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SurfSpot":
        """
        Firestore 문서(또는 검증된 요청 데이터) 딕셔너리로부터 SurfSpot 인스턴스를 생성합니다.
        문자열 Enum 값과 중첩 딕셔너리(location, forecast)를 자동으로 변환합니다.
        """
        processed_data = DateTimeUtils.from_firestore(dict(data))

        for field_name, (enum_cls, default) in _ENUM_FIELDS.items():
            value = processed_data.get(field_name)
            if value is None or isinstance(value, enum_cls):
                processed_data[field_name] = value or default
                continue
            try:
                processed_data[field_name] = enum_cls(value)
            except ValueError:
                logging.warning(f"Invalid {enum_cls.__name__} value '{value}' for spot {processed_data.get('spot_id')}. Using default.")
                processed_data[field_name] = default

        location = processed_data.get('location')
        if isinstance(location, dict):
            processed_data['location'] = Location(lat=location.get('lat'), lng=location.get('lng'))
        elif location is None:
            processed_data['location'] = Location()

        forecast = processed_data.get('forecast')
        if isinstance(forecast, dict):
            processed_data['forecast'] = ForecastSnapshot.from_dict(forecast)

        if processed_data.get('season') is None:
            processed_data['season'] = []
        if processed_data.get('comments') is None:
            processed_data['comments'] = []

        known = {k: v for k, v in processed_data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장용 딕셔너리로 변환합니다."""
        spot_dict = asdict(self)
        for field_name in _ENUM_FIELDS:
            spot_dict[field_name] = getattr(self, field_name).value
        return spot_dict
