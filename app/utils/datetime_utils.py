# app/utils/datetime_utils.py
"""
프로젝트 전체에서 일관된 시간/날짜 처리를 위한 중앙화된 유틸리티 모듈

이 모듈의 목적:
1. 관측 일지/댓글/일정의 createdAt을 밀리초 timestamp(int)로 통일
2. 캘린더 일정의 날짜를 'YYYY-MM-DD' 문자열로 통일
3. Timezone 처리 일관성 확보 (백엔드는 UTC)
"""

import logging
from datetime import datetime, date, timezone
from typing import Any, Union
from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

DATE_FORMAT = '%Y-%m-%d'


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def now_ms() -> int:
        """현재 시간을 Unix timestamp (밀리초)로 반환. 웹 클라이언트의 Date.now()와 같은 단위입니다."""
        return DateTimeUtils.to_timestamp_ms(DateTimeUtils.now())

    @staticmethod
    def parse_date_string(date_string: str) -> date:
        """
        날짜 문자열을 date 객체로 파싱

        지원 포맷:
        - 2025-01-15
        - 2025/01/15
        - 01-15-2025
        """
        try:
            if not date_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            dt = dateutil_parser.parse(date_string)
            return dt.date()

        except Exception as e:
            logger.error(f"날짜 문자열 파싱 실패: {date_string} - {e}")
            raise ValueError(f"잘못된 날짜 형식입니다: {date_string}")

    @staticmethod
    def to_date_string(d: date) -> str:
        """date 객체를 YYYY-MM-DD 형식 문자열로 변환"""
        try:
            return d.strftime(DATE_FORMAT)
        except Exception as e:
            logger.error(f"날짜 문자열 변환 실패: {d} - {e}")
            raise ValueError(f"date 객체를 문자열로 변환할 수 없습니다: {d}")

    @staticmethod
    def normalize_date_string(value: Any, field_name: str = "date") -> str:
        """어떤 형식으로 들어온 날짜든 'YYYY-MM-DD'로 정규화합니다. 캘린더 일정의 저장 형식입니다."""
        return DateTimeUtils.to_date_string(DateTimeUtils.validate_date_field(value, field_name))

    @staticmethod
    def get_month_range(year: int, month: int) -> tuple[date, date]:
        """특정 년월의 첫째 날과 마지막 날을 반환"""
        try:
            start_date = date(year, month, 1)
            end_date = start_date + relativedelta(months=1) - relativedelta(days=1)
            return start_date, end_date

        except Exception as e:
            logger.error(f"월 범위 계산 실패: {year}-{month} - {e}")
            raise ValueError(f"월 범위를 계산할 수 없습니다: {year}-{month}")

    @staticmethod
    def validate_date_field(value: Any, field_name: str = "date") -> date:
        """
        API 요청에서 받은 date 값을 검증하고 변환

        Args:
            value: 검증할 값 (문자열, date 객체 등)
            field_name: 필드명 (오류 메시지용)

        Returns:
            검증된 date 객체

        Raises:
            ValueError: 잘못된 형식이거나 파싱할 수 없는 경우
        """
        try:
            if value is None:
                raise ValueError(f"{field_name}은 필수 필드입니다")

            if isinstance(value, str):
                return DateTimeUtils.parse_date_string(value)

            # datetime은 date의 하위 클래스이므로 먼저 검사합니다.
            elif isinstance(value, datetime):
                return value.date()

            elif isinstance(value, date):
                return value

            else:
                raise ValueError(f"{field_name}은 문자열 또는 date/datetime 객체여야 합니다")

        except Exception as e:
            logger.error(f"{field_name} 검증 실패: {value} - {e}")
            raise ValueError(f"잘못된 {field_name} 형식입니다: {value}")

    @staticmethod
    def from_timestamp_ms(timestamp_ms: int) -> datetime:
        """
        Unix timestamp (밀리초)를 UTC datetime 객체로 변환

        Args:
            timestamp_ms: Unix timestamp in milliseconds

        Returns:
            UTC timezone-aware datetime 객체
        """
        try:
            if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, (int, float)):
                raise ValueError("timestamp_ms는 숫자여야 합니다")

            return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)

        except Exception as e:
            logger.error(f"timestamp_ms 변환 실패: {timestamp_ms} - {e}")
            raise ValueError(f"잘못된 timestamp 형식입니다: {timestamp_ms}")

    @staticmethod
    def to_timestamp_ms(dt: Union[datetime, Any]) -> int:
        """
        datetime 객체를 Unix timestamp (밀리초)로 변환

        Args:
            dt: datetime 객체 또는 Firestore timestamp

        Returns:
            Unix timestamp in milliseconds
        """
        try:
            if isinstance(dt, datetime):
                if dt.tzinfo is None:
                    dt = dt.replace(tzinfo=timezone.utc)
                return int(dt.timestamp() * 1000)

            # Firestore timestamp 객체 처리
            elif hasattr(dt, 'timestamp'):
                return int(dt.timestamp() * 1000)

            else:
                raise ValueError(f"datetime 객체 또는 Firestore timestamp여야 합니다: {type(dt)}")

        except Exception as e:
            logger.error(f"timestamp_ms 변환 실패: {dt} - {e}")
            raise ValueError(f"timestamp로 변환할 수 없습니다: {dt}")
