# app/utils/test_datetime_utils.py
"""
시간 관리 유틸리티 기능 테스트

사용법: python -m pytest app/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone
from app.utils.datetime_utils import DateTimeUtils

def test_now_ms_is_millisecond_epoch():
    """now_ms는 Date.now()와 같은 밀리초 단위여야 함"""
    before = int(datetime.now(timezone.utc).timestamp() * 1000)
    value = DateTimeUtils.now_ms()
    after = int(datetime.now(timezone.utc).timestamp() * 1000)

    assert isinstance(value, int)
    assert before <= value <= after + 1

def test_parse_date_string():
    """날짜 문자열 파싱 테스트"""
    test_cases = [
        "2025-01-15",
        "2025/01/15",
        "01-15-2025"
    ]

    for date_string in test_cases:
        assert DateTimeUtils.parse_date_string(date_string) == date(2025, 1, 15)

def test_normalize_date_string():
    """캘린더 저장 형식(YYYY-MM-DD) 정규화 테스트"""
    assert DateTimeUtils.normalize_date_string("2025/3/4") == "2025-03-04"
    assert DateTimeUtils.normalize_date_string(date(2025, 12, 14)) == "2025-12-14"
    assert DateTimeUtils.normalize_date_string(datetime(2025, 8, 12, 23, 0)) == "2025-08-12"

def test_validate_date_field():
    """date 필드 검증 테스트"""
    valid_cases = [
        "2025-01-15",
        date(2025, 1, 15),
        datetime(2025, 1, 15, 10, 30)
    ]

    for case in valid_cases:
        result = DateTimeUtils.validate_date_field(case)
        assert type(result) is date
        assert result == date(2025, 1, 15)

def test_get_month_range():
    """월 범위 계산 테스트 (윤년, 12월 포함)"""
    assert DateTimeUtils.get_month_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert DateTimeUtils.get_month_range(2025, 12) == (date(2025, 12, 1), date(2025, 12, 31))

def test_timestamp_ms_conversion():
    """밀리초 timestamp 변환 테스트"""
    dt = datetime(2025, 1, 3, 0, 0, tzinfo=timezone.utc)
    ms = DateTimeUtils.to_timestamp_ms(dt)

    assert ms == 1735862400000
    assert DateTimeUtils.from_timestamp_ms(ms) == dt

def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_date_string("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_date_string("")

    with pytest.raises(ValueError):
        DateTimeUtils.validate_date_field(None)

    with pytest.raises(ValueError):
        DateTimeUtils.get_month_range(2025, 13)

    with pytest.raises(ValueError):
        DateTimeUtils.from_timestamp_ms("1000")
