"""날짜 범위 유틸리티 (UTC 기준)"""

from __future__ import annotations

from datetime import datetime, time, timezone
from typing import Optional

from src.core.exceptions import ValidationException


def to_iso_millis(value: datetime) -> str:
    """VTEX 필터 형식의 ISO-8601 문자열 (밀리초, Z 접미사)"""
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def parse_iso_instant(field: str, value: str) -> datetime:
    """ISO-8601 문자열을 timezone-aware datetime으로 변환

    timezone이 없으면 UTC로 간주합니다.

    Raises:
        ValidationException: 형식이 올바르지 않은 경우
    """
    text = (value or "").strip()
    if not text:
        raise ValidationException(field, "empty date")
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValidationException(field, f"not an ISO-8601 instant: {value}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def utc_day_bounds(now: Optional[datetime] = None) -> tuple[str, str]:
    """오늘(UTC)의 시작/끝 시각

    Returns:
        ("YYYY-MM-DDT00:00:00.000Z", "YYYY-MM-DDT23:59:59.999Z")
    """
    now = now or datetime.now(timezone.utc)
    day = now.astimezone(timezone.utc).date()
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = datetime.combine(day, time(23, 59, 59, 999000), tzinfo=timezone.utc)
    return to_iso_millis(start), to_iso_millis(end)


def resolve_date_range(
    date_from: Optional[str],
    date_to: Optional[str],
    now: Optional[datetime] = None,
) -> tuple[str, str]:
    """입력 날짜를 확정합니다. 생략된 쪽은 오늘(UTC)의 시작/끝으로 채웁니다.

    입력 문자열은 그대로 유지합니다 (응답에 그대로 echo).
    순서 검증은 두 값을 모두 받은 경우에만 합니다. 한쪽만 받아 기본값과
    뒤집힌 범위는 빈 범위로 취급합니다 (is_empty_range).

    Raises:
        ValidationException: 형식 오류 또는 (둘 다 받은 경우) date_from > date_to
    """
    default_from, default_to = utc_day_bounds(now)
    resolved_from = date_from or default_from
    resolved_to = date_to or default_to

    start = parse_iso_instant("dateFrom", resolved_from)
    end = parse_iso_instant("dateTo", resolved_to)
    if date_from and date_to and start > end:
        raise ValidationException("dateFrom", f"{resolved_from} is after dateTo {resolved_to}")

    return resolved_from, resolved_to


def is_empty_range(date_from: str, date_to: str) -> bool:
    """시작이 끝보다 늦으면 일치하는 주문이 있을 수 없음"""
    return parse_iso_instant("dateFrom", date_from) > parse_iso_instant("dateTo", date_to)
