"""
佳明 Connect 接口返回结构

字段名与接口 JSON 保持一致（通过 alias 映射为 snake_case），未知字段忽略。
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class GarminDto(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ActivityTypeDto(GarminDto):
    type_key: Optional[str] = Field(None, alias="typeKey")


class GarminActivityDto(GarminDto):
    """活动搜索接口中的单条记录"""
    activity_id: int = Field(..., alias="activityId")
    activity_name: Optional[str] = Field(None, alias="activityName")
    start_time_local: Optional[str] = Field(None, alias="startTimeLocal", description="如 2025-12-30 10:31:49")
    duration: Optional[float] = Field(None, description="秒")
    distance: Optional[float] = Field(None, description="米")
    calories: Optional[float] = None
    average_hr: Optional[float] = Field(None, alias="averageHR")
    average_speed: Optional[float] = Field(None, alias="averageSpeed", description="米/秒")
    average_swolf: Optional[float] = Field(None, alias="averageSwolf")
    strokes: Optional[float] = None
    activity_type: Optional[ActivityTypeDto] = Field(None, alias="activityType")


class GarminLengthDto(GarminDto):
    """单个泳池长度（length）"""
    start_time_gmt: Optional[str] = Field(None, alias="startTimeGMT")
    duration: Optional[float] = None
    average_speed: Optional[float] = Field(None, alias="averageSpeed")
    average_swolf: Optional[float] = Field(None, alias="averageSWOLF")
    average_hr: Optional[float] = Field(None, alias="averageHR")


class GarminLapDto(GarminDto):
    """单趟（lap），可能包含若干 length"""
    lap_index: Optional[int] = Field(None, alias="lapIndex")
    start_time_gmt: Optional[str] = Field(None, alias="startTimeGMT")
    distance: Optional[float] = None
    duration: Optional[float] = None
    average_speed: Optional[float] = Field(None, alias="averageSpeed")
    average_hr: Optional[float] = Field(None, alias="averageHR")
    average_swolf: Optional[float] = Field(None, alias="averageSWOLF")
    total_strokes: Optional[float] = Field(None, alias="totalNumberOfStrokes")
    lengths: Optional[List[GarminLengthDto]] = Field(None, alias="lengthDTOs")


class GarminSplitsResponse(GarminDto):
    """分段接口返回"""
    laps: Optional[List[GarminLapDto]] = Field(None, alias="lapDTOs")
    lengths: Optional[List[GarminLengthDto]] = Field(None, alias="lengthDTOs")
