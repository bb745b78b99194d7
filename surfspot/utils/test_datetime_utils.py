# surfspot/utils/test_datetime_utils.py
"""
시간 유틸리티 기능 테스트

사용법: python -m pytest surfspot/utils/test_datetime_utils.py -v
"""

from datetime import datetime, date, timezone, timedelta
from surfspot.utils.datetime_utils import DateTimeUtils

def test_now_is_utc_aware():
    """현재 시간은 UTC aware 여야 함"""
    current = DateTimeUtils.now()
    assert current.tzinfo == timezone.utc

def test_to_iso_string():
    """ISO 문자열 변환 테스트"""
    aware = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    naive = datetime(2024, 1, 15, 10, 30)
    kst = datetime(2024, 1, 15, 19, 30, tzinfo=timezone(timedelta(hours=9)))

    assert DateTimeUtils.to_iso_string(aware) == "2024-01-15T10:30:00Z"
    assert DateTimeUtils.to_iso_string(naive) == "2024-01-15T10:30:00Z"
    # 다른 timezone은 UTC로 정규화되어야 함
    assert DateTimeUtils.to_iso_string(kst) == "2024-01-15T10:30:00Z"

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'season_start': date(2024, 5, 1),
        'captured_at': datetime(2024, 1, 15, 10, 30),
        'forecast': {
            'last_fetched': datetime(2024, 1, 15, 10, 30)
        },
        'history': [
            {'created_at': datetime(2024, 1, 1)}
        ],
        'name': 'Pipeline'
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert isinstance(converted['season_start'], datetime)
    assert converted['season_start'].tzinfo == timezone.utc
    assert converted['captured_at'].tzinfo == timezone.utc
    assert converted['forecast']['last_fetched'].tzinfo == timezone.utc
    assert converted['history'][0]['created_at'].tzinfo == timezone.utc
    assert converted['name'] == 'Pipeline'

def test_from_firestore():
    """Firestore 읽기 변환 테스트"""
    kst = timezone(timedelta(hours=9))
    stored = {
        'created_at': datetime(2024, 1, 15, 19, 30, tzinfo=kst),
        'updated_at': datetime(2024, 1, 15, 10, 30),
        'rating': 4.0,
    }

    converted = DateTimeUtils.from_firestore(stored)

    assert converted['created_at'] == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert converted['updated_at'].tzinfo == timezone.utc
    assert converted['rating'] == 4.0
