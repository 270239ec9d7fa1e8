"""分趟 / 分长度数据重组

分段接口返回若干 lap，每个 lap 可能带有更细的 length 列表（也可能没有）。

曲线构建规则：
- 只要响应里存在任意 length，就用展开后的 length 记录（分辨率更高）；否则退回 lap；
- 逐条累加 duration 作为 x（累计秒数）；
- 配速点 (x, 100/速度) 仅在速度 > 0 时产生；心率、SWOLF 点仅在值 > 0 时产生。

Lap 列表与曲线并行构建：有 lapIndex 用 lapIndex，否则用从 1 开始的序号。
"""

from typing import Any, Dict, List, Optional, Sequence, Union

from ...schemas.garmin import GarminLapDto, GarminLengthDto, GarminSplitsResponse
from ...schemas.swims import Activity, ActivityDetail, Lap, MetricPoint, MetricSeries
from .extract import derive_pace

SplitRecord = Union[GarminLapDto, GarminLengthDto]


def _optional_int(value: Optional[float]) -> Optional[int]:
    return int(value) if value is not None else None


def _positive(value: Optional[float]) -> bool:
    return value is not None and value > 0


def build_laps(splits: GarminSplitsResponse) -> List[Lap]:
    laps: List[Lap] = []
    for position, dto in enumerate(splits.laps or [], start=1):
        laps.append(
            Lap(
                index=dto.lap_index if dto.lap_index is not None else position,
                duration_seconds=dto.duration or 0.0,
                distance_meters=dto.distance or 0.0,
                pace_seconds_per_100m=derive_pace(dto.average_speed),
                avg_heart_rate=_optional_int(dto.average_hr),
                stroke_count=_optional_int(dto.total_strokes),
                swolf=_optional_int(dto.average_swolf),
            )
        )
    return laps


def flatten_lengths(splits: GarminSplitsResponse) -> List[GarminLengthDto]:
    """按时间顺序展开所有 length；lap 内没有时再看顶层 lengthDTOs。"""
    lengths = [length for lap in (splits.laps or []) for length in (lap.lengths or [])]
    if not lengths:
        lengths = list(splits.lengths or [])
    if lengths and all(length.start_time_gmt for length in lengths):
        lengths.sort(key=lambda length: length.start_time_gmt)
    return lengths


def build_metric_series(records: Sequence[SplitRecord]) -> MetricSeries:
    pace: List[MetricPoint] = []
    heart_rate: List[MetricPoint] = []
    swolf: List[MetricPoint] = []
    elapsed = 0.0
    for record in records:
        elapsed += record.duration or 0.0
        if _positive(record.average_speed):
            pace.append(MetricPoint(x=elapsed, y=100.0 / record.average_speed))
        if _positive(record.average_hr):
            heart_rate.append(MetricPoint(x=elapsed, y=record.average_hr))
        if _positive(record.average_swolf):
            swolf.append(MetricPoint(x=elapsed, y=record.average_swolf))
    return MetricSeries(pace=pace, heart_rate=heart_rate, swolf=swolf)


def build_activity_detail(summary: Activity, payload: Optional[Dict[str, Any]]) -> ActivityDetail:
    """原始分段响应 + 活动概要 -> ActivityDetail。"""
    splits = GarminSplitsResponse.model_validate(payload or {})
    lengths = flatten_lengths(splits)
    records: Sequence[SplitRecord] = lengths if lengths else (splits.laps or [])
    return ActivityDetail(
        summary=summary,
        laps=build_laps(splits),
        metrics=build_metric_series(records),
    )
