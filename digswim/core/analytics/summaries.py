"""周 / 月 / 年游泳汇总

说明：
- 每次读取时基于当前缓存快照重新计算，不落盘；
- 距离、时长、卡路里、次数直接求和；
- 平均配速 / 心率 / SWOLF 只统计该字段 > 0 的活动（缺失与 0 同样排除），整数向下取整；
- 柱状图：周按星期（周一=0）、月按日期、年按月份分桶，越界下标直接跳过。
"""

import calendar
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from ...schemas.swims import Activity, MonthlySummary, WeeklySummary, YearlySummary


def week_start_for(day: date) -> date:
    """任意日期 -> 所在周的周一。"""
    return day - timedelta(days=day.weekday())


def positive_mean(values: Iterable[Optional[int]]) -> int:
    """只对正值求平均；没有正值时返回 0。"""
    valid = [v for v in values if v is not None and v > 0]
    if not valid:
        return 0
    return sum(valid) // len(valid)


def activities_between(activities: Sequence[Activity], start: date, end: date) -> List[Activity]:
    """开始日期落在 [start, end] 内的活动（保持原有顺序）。"""
    return [a for a in activities if start <= a.start_time.date() <= end]


def _totals(activities: Sequence[Activity]) -> Dict[str, int]:
    return {
        "total_distance_meters": sum(a.distance_meters for a in activities),
        "total_duration_seconds": sum(a.duration_seconds for a in activities),
        "swim_count": len(activities),
        "total_calories": sum(a.calories for a in activities),
        "avg_pace_seconds_per_100m": positive_mean(a.avg_pace_seconds_per_100m for a in activities),
        "avg_heart_rate": positive_mean(a.avg_heart_rate for a in activities),
        "avg_swolf": positive_mean(a.swolf for a in activities),
    }


def _histogram(activities: Sequence[Activity], size: int, bucket: Callable[[Activity], int]) -> List[int]:
    buckets = [0] * size
    for activity in activities:
        index = bucket(activity)
        if 0 <= index < size:
            buckets[index] += activity.distance_meters
    return buckets


def weekly_summary(activities: Sequence[Activity], week_start: date) -> WeeklySummary:
    week_end = week_start + timedelta(days=6)
    in_range = activities_between(activities, week_start, week_end)
    return WeeklySummary(
        week_start=week_start,
        week_end=week_end,
        daily_distances=_histogram(in_range, 7, lambda a: a.start_time.weekday()),
        **_totals(in_range),
    )


def monthly_summary(activities: Sequence[Activity], year: int, month: int) -> MonthlySummary:
    days_in_month = calendar.monthrange(year, month)[1]
    in_range = activities_between(activities, date(year, month, 1), date(year, month, days_in_month))
    return MonthlySummary(
        year=year,
        month=month,
        daily_distances=_histogram(in_range, days_in_month, lambda a: a.start_time.day - 1),
        **_totals(in_range),
    )


def yearly_summary(activities: Sequence[Activity], year: int) -> YearlySummary:
    in_range = [a for a in activities if a.start_time.year == year]
    return YearlySummary(
        year=year,
        monthly_distances=_histogram(in_range, 12, lambda a: a.start_time.month - 1),
        **_totals(in_range),
    )
