"""
Swims API routes

给展示层用的薄接口：活动列表、周/月/年汇总、活动详情，以及手动同步 / 向前翻页。
同步服务内部吞掉远端错误，这里只把“找不到”映射为 404，其余意外错误映射为 500。
"""

from datetime import date
from typing import List, Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from ..core.analytics.summaries import week_start_for
from ..schemas.swims import (
    Activity,
    ActivityDetail,
    MonthlySummary,
    SyncStatusResponse,
    WeeklySummary,
    YearlySummary,
)
from ..services.sync_service import SwimSyncService
from ..utils import get_sync_service

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/swims", tags=["游泳"])


@router.get("/activities", response_model=List[Activity])
def list_activities(service: SwimSyncService = Depends(get_sync_service)):
    """全部已缓存活动（按开始时间倒序）。"""
    try:
        return service.get_all_activities()
    except Exception as e:
        logger.exception("[api][activities] failed")
        raise HTTPException(status_code=500, detail=f"获取活动列表失败: {str(e)}")


@router.get("/activities/week", response_model=List[Activity])
def list_week_activities(
    week_start: Optional[date] = Query(None, description="所在周任意一天，默认本周"),
    service: SwimSyncService = Depends(get_sync_service),
):
    try:
        monday = week_start_for(week_start or service.today())
        return service.get_activities_for_week(monday)
    except Exception as e:
        logger.exception("[api][week-activities] failed")
        raise HTTPException(status_code=500, detail=f"获取本周活动失败: {str(e)}")


@router.get("/activities/{activity_id}", response_model=ActivityDetail)
def get_activity_detail(activity_id: str, service: SwimSyncService = Depends(get_sync_service)):
    """
    获取活动详情（分趟 + 配速/心率/SWOLF 曲线）

    异常:
        HTTPException 404 - 缓存中没有该活动，或详情暂不可用（未登录/远端失败）
    """
    try:
        detail = service.get_activity_detail(activity_id)
        if detail is None:
            raise HTTPException(status_code=404, detail=f"活动 {activity_id} 的详情不可用")
        return detail
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("[api][detail] activity_id=%s", activity_id)
        raise HTTPException(status_code=500, detail=f"获取活动详情失败: {str(e)}")


@router.get("/summary/week", response_model=WeeklySummary)
def get_weekly_summary(
    day: Optional[date] = Query(None, description="所在周任意一天，默认今天"),
    service: SwimSyncService = Depends(get_sync_service),
):
    try:
        return service.get_weekly_summary(week_start_for(day or service.today()))
    except Exception as e:
        logger.exception("[api][summary-week] failed")
        raise HTTPException(status_code=500, detail=f"获取周汇总失败: {str(e)}")


@router.get("/summary/month", response_model=MonthlySummary)
def get_monthly_summary(
    year: int = Query(..., ge=1970, description="年份"),
    month: int = Query(..., ge=1, le=12, description="月份（1-12）"),
    service: SwimSyncService = Depends(get_sync_service),
):
    try:
        return service.get_monthly_summary(year, month)
    except Exception as e:
        logger.exception("[api][summary-month] failed")
        raise HTTPException(status_code=500, detail=f"获取月汇总失败: {str(e)}")


@router.get("/summary/year", response_model=YearlySummary)
def get_yearly_summary(
    year: int = Query(..., ge=1970, description="年份"),
    service: SwimSyncService = Depends(get_sync_service),
):
    try:
        return service.get_yearly_summary(year)
    except Exception as e:
        logger.exception("[api][summary-year] failed")
        raise HTTPException(status_code=500, detail=f"获取年汇总失败: {str(e)}")


@router.post("/sync/refresh", response_model=SyncStatusResponse)
def refresh(service: SwimSyncService = Depends(get_sync_service)):
    """手动同步：清空内存并重新拉取今年。"""
    try:
        service.refresh_data()
        return service.status()
    except Exception as e:
        logger.exception("[api][refresh] failed")
        raise HTTPException(status_code=500, detail=f"同步失败: {str(e)}")


@router.post("/sync/load-more", response_model=SyncStatusResponse)
def load_more(service: SwimSyncService = Depends(get_sync_service)):
    """向前再加载一年。"""
    try:
        service.load_more()
        return service.status()
    except Exception as e:
        logger.exception("[api][load-more] failed")
        raise HTTPException(status_code=500, detail=f"加载更早数据失败: {str(e)}")


@router.get("/sync/status", response_model=SyncStatusResponse)
def sync_status(service: SwimSyncService = Depends(get_sync_service)):
    return service.status()
