"""活动列表映射

把活动搜索接口返回的原始记录转换为领域模型 Activity：
- 只保留游泳类记录（swimming / lap_swimming / open_water_swimming）；
- 配速由平均速度推导：100 / 速度（米/秒），向下取整到秒；速度缺失或非正时为 0；
- 单条记录无法解析（缺 id、时间格式不对等）时跳过并记录日志，不影响整批。
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging
import math

from pydantic import ValidationError

from ...schemas.garmin import GarminActivityDto
from ...schemas.swims import DATE_FORMAT, Activity, SwimType

logger = logging.getLogger(__name__)


SWIM_TYPE_KEYS = {
    "swimming": SwimType.POOL,
    "lap_swimming": SwimType.POOL,
    "open_water_swimming": SwimType.OPEN_WATER,
}


def derive_pace(speed: Optional[float]) -> int:
    """平均速度（米/秒）-> 配速（秒/100米，向下取整）。"""
    if speed is None or speed <= 0:
        return 0
    return int(math.floor(100.0 / speed))


def _optional_int(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def _non_negative_int(value: Optional[float]) -> int:
    if value is None:
        return 0
    return max(0, int(value))


def swim_type_of(dto: GarminActivityDto) -> Optional[SwimType]:
    type_key = dto.activity_type.type_key if dto.activity_type else None
    return SWIM_TYPE_KEYS.get(type_key or "")


def map_activity(dto: GarminActivityDto) -> Optional[Activity]:
    """单条 DTO -> Activity；非游泳或时间无法解析时返回 None。"""
    swim_type = swim_type_of(dto)
    if swim_type is None:
        return None
    try:
        start_time = datetime.strptime(dto.start_time_local or "", DATE_FORMAT)
    except ValueError:
        logger.warning(
            "[garmin-extract][bad-start-time] activity_id=%s value=%r",
            dto.activity_id, dto.start_time_local,
        )
        return None
    return Activity(
        id=str(dto.activity_id),
        type=swim_type,
        activity_name=dto.activity_name,
        start_time=start_time,
        distance_meters=_non_negative_int(dto.distance),
        duration_seconds=_non_negative_int(dto.duration),
        calories=_non_negative_int(dto.calories),
        avg_pace_seconds_per_100m=derive_pace(dto.average_speed),
        avg_heart_rate=_optional_int(dto.average_hr),
        swolf=_optional_int(dto.average_swolf),
        total_strokes=_optional_int(dto.strokes),
    )


def parse_activity_list(records: Iterable[Dict[str, Any]]) -> List[Activity]:
    """一页原始记录 -> 游泳活动列表（保持原顺序）。"""
    activities: List[Activity] = []
    for raw in records:
        try:
            dto = GarminActivityDto.model_validate(raw)
        except ValidationError as e:
            logger.warning("[garmin-extract][invalid-record] err=%s", e.errors()[:1])
            continue
        activity = map_activity(dto)
        if activity is not None:
            activities.append(activity)
    return activities
