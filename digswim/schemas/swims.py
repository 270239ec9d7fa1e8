"""
游泳活动领域模型

定义缓存、汇总与详情接口共用的数据结构。
活动一经缓存即不可变（frozen），刷新时整体替换而不是原地修改。
"""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


# 缓存文件与佳明接口统一使用的本地时间格式
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class SwimType(str, Enum):
    """游泳类型枚举"""
    POOL = "pool"
    OPEN_WATER = "open_water"


class Activity(BaseModel):
    """单次游泳活动（概要）"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="活动ID（全局唯一）")
    type: SwimType = Field(SwimType.POOL, description="泳池 / 公开水域")
    activity_name: Optional[str] = Field(None, description="活动名称")
    start_time: datetime = Field(..., description="开始时间（本地时间，精确到秒）")
    distance_meters: int = Field(0, ge=0, description="距离（米）")
    duration_seconds: int = Field(0, ge=0, description="时长（秒）")
    calories: int = Field(0, ge=0, description="卡路里")
    avg_pace_seconds_per_100m: int = Field(0, ge=0, description="平均配速（秒/100米），0 表示未知")
    avg_heart_rate: Optional[int] = Field(None, description="平均心率")
    swolf: Optional[int] = Field(None, description="平均 SWOLF")
    total_strokes: Optional[int] = Field(None, description="总划水次数")

    @field_validator("start_time", mode="before")
    @classmethod
    def _parse_start_time(cls, value):
        if isinstance(value, str):
            return datetime.strptime(value, DATE_FORMAT)
        return value

    @field_serializer("start_time")
    def _dump_start_time(self, value: datetime) -> str:
        return value.strftime(DATE_FORMAT)


class Lap(BaseModel):
    """趟（lap）数据"""
    model_config = ConfigDict(frozen=True)

    index: int
    duration_seconds: float = 0.0
    distance_meters: float = 0.0
    pace_seconds_per_100m: int = 0
    avg_heart_rate: Optional[int] = None
    stroke_count: Optional[int] = None
    swolf: Optional[int] = None


class MetricPoint(BaseModel):
    """曲线上的一个点：x 为累计时长（秒），y 为指标值"""
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class MetricSeries(BaseModel):
    """详情页三条曲线：配速、心率、SWOLF"""
    pace: List[MetricPoint] = Field(default_factory=list)
    heart_rate: List[MetricPoint] = Field(default_factory=list)
    swolf: List[MetricPoint] = Field(default_factory=list)


class ActivityDetail(BaseModel):
    """活动详情：概要 + 分趟 + 曲线，按需构建，不落盘"""
    summary: Activity
    laps: List[Lap] = Field(default_factory=list)
    metrics: MetricSeries = Field(default_factory=MetricSeries)


class SummaryTotals(BaseModel):
    """周/月/年汇总的公共字段"""
    total_distance_meters: int = 0
    total_duration_seconds: int = 0
    swim_count: int = 0
    total_calories: int = 0
    avg_pace_seconds_per_100m: int = Field(0, description="仅统计配速>0的活动")
    avg_heart_rate: int = Field(0, description="仅统计心率>0的活动")
    avg_swolf: int = Field(0, description="仅统计 SWOLF>0 的活动")


class WeeklySummary(SummaryTotals):
    """周汇总（周一开始）"""
    week_start: date
    week_end: date
    daily_distances: List[int] = Field(..., description="周一到周日每天的距离（米）")


class MonthlySummary(SummaryTotals):
    """月汇总"""
    year: int
    month: int
    daily_distances: List[int] = Field(..., description="当月每天的距离（米）")


class YearlySummary(SummaryTotals):
    """年汇总"""
    year: int
    monthly_distances: List[int] = Field(..., description="1-12 月每月的距离（米）")


class SyncStatusResponse(BaseModel):
    """同步状态"""
    has_session: bool
    cache_loaded: bool
    loaded_years: List[int]
    activity_count: int
