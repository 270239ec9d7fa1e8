"""
Swim Sync Service（游泳数据同步服务）

职责：
- 独占内存中的活动集合与“已加载年份”集合
- 冷启动时从缓存文件加载一次（多调用方并发时也只读一次盘）
- 按自然年从佳明拉取活动，合并去重、按开始时间倒序，整体替换内存快照并落盘
- 提供按周 / 月 / 年 / 全部的读取接口，读取时顺带补齐对应年份（自愈式读取）

并发：
- `_cache_lock`：只保护一次性的磁盘加载
- `_write_lock`：串行化“拉取-合并-落盘”，避免两个年份同时合并时互相覆盖
- 读者只拿到不可变快照（tuple），永远看不到合并到一半的状态

失败（未登录、网络、解析）只记日志，内存状态保持不变，不向调用方抛异常。
"""

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple
import logging
import threading

from ..analyzers.garmin.extract import parse_activity_list
from ..clients.garmin_client import GarminAuthError, GarminClient
from ..config import ACTIVITY_MAX_PAGES, ACTIVITY_PAGE_SIZE, MIN_HISTORY_YEAR
from ..core.analytics.summaries import (
    activities_between,
    monthly_summary,
    weekly_summary,
    yearly_summary,
)
from ..infrastructure.activity_store import ActivityFileStore
from ..infrastructure.session_state import SessionState
from ..schemas.swims import (
    Activity,
    ActivityDetail,
    MonthlySummary,
    SyncStatusResponse,
    WeeklySummary,
    YearlySummary,
)
from .auth_service import GarminAuthService
from .detail_service import ActivityDetailService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivitySnapshot:
    """某一时刻的活动集合：倒序列表 + id 索引，一起整体替换。"""
    activities: Tuple[Activity, ...] = ()
    by_id: Dict[str, Activity] = field(default_factory=dict)

    @classmethod
    def of(cls, activities: Sequence[Activity]) -> "ActivitySnapshot":
        return cls(activities=tuple(activities), by_id={a.id: a for a in activities})


def merge_activities(current: Iterable[Activity], incoming: Iterable[Activity]) -> List[Activity]:
    """按 id 合并（同 id 后者覆盖前者），再按开始时间倒序。"""
    by_id: Dict[str, Activity] = {}
    for activity in current:
        by_id[activity.id] = activity
    for activity in incoming:
        by_id[activity.id] = activity
    return sorted(by_id.values(), key=lambda a: a.start_time, reverse=True)


class SwimSyncService:
    """游泳数据同步服务"""

    def __init__(
        self,
        client: GarminClient,
        session: SessionState,
        auth: GarminAuthService,
        store: ActivityFileStore,
        detail_service: Optional[ActivityDetailService] = None,
        today: Callable[[], date] = date.today,
        min_history_year: int = MIN_HISTORY_YEAR,
        page_size: int = ACTIVITY_PAGE_SIZE,
        max_pages: int = ACTIVITY_MAX_PAGES,
    ):
        self.client = client
        self.session = session
        self.auth = auth
        self.store = store
        self.detail_service = detail_service or ActivityDetailService(client, session, auth)
        self.today = today
        self.min_history_year = min_history_year
        self.page_size = page_size
        self.max_pages = max_pages

        self._snapshot = ActivitySnapshot()
        self._loaded_years: set = set()
        self._cache_loaded = False
        self._cache_lock = threading.Lock()
        self._write_lock = threading.Lock()

    # ------------------------------------------------------------------
    # 状态
    # ------------------------------------------------------------------
    @property
    def activities(self) -> Tuple[Activity, ...]:
        """当前快照（按开始时间倒序）。"""
        return self._snapshot.activities

    @property
    def loaded_years(self) -> FrozenSet[int]:
        return frozenset(self._loaded_years)

    @property
    def cache_loaded(self) -> bool:
        return self._cache_loaded

    def status(self) -> SyncStatusResponse:
        return SyncStatusResponse(
            has_session=self.session.has_session(),
            cache_loaded=self._cache_loaded,
            loaded_years=sorted(self.loaded_years, reverse=True),
            activity_count=len(self.activities),
        )

    # ------------------------------------------------------------------
    # 加载与同步
    # ------------------------------------------------------------------
    def ensure_cache_loaded(self) -> None:
        """进程内最多读一次缓存文件；并发调用者等待第一个完成。"""
        if self._cache_loaded:
            return
        with self._cache_lock:
            if self._cache_loaded:
                return
            cached = self.store.load()
            if cached:
                with self._write_lock:
                    merged = merge_activities(self._snapshot.activities, cached)
                    self._snapshot = ActivitySnapshot.of(merged)
                    years = {a.start_time.year for a in cached}
                    self._loaded_years.update(years)
                logger.info("[sync][cache-loaded] activities=%s years=%s", len(cached), sorted(years))
            self._cache_loaded = True

    def ensure_data_loaded(self, year: Optional[int] = None, force_refresh: bool = False) -> None:
        """确保某一自然年的数据已拉取；已加载且非强制刷新时直接返回。"""
        if year is None:
            year = self.today().year
        self.ensure_cache_loaded()

        if not self.auth.ensure_session():
            logger.warning("[sync][no-session] login failed or no credentials, year=%s", year)
            return

        if not force_refresh and year in self._loaded_years:
            logger.debug("[sync][cache-hit] year=%s", year)
            return

        with self._write_lock:
            # 排队期间可能已被其他调用方拉取
            if not force_refresh and year in self._loaded_years:
                logger.debug("[sync][cache-hit] year=%s (fetched while waiting)", year)
                return
            logger.info("[sync][fetch] year=%s force_refresh=%s", year, force_refresh)
            try:
                batch = self._fetch_year(year)
            except GarminAuthError as e:
                logger.warning("[sync][auth-rejected] year=%s status=%s, re-login", year, e.status_code)
                self.auth.login()
                return
            except Exception:
                logger.exception("[sync][fetch-error] year=%s", year)
                return

            merged = merge_activities(self._snapshot.activities, batch)
            self._snapshot = ActivitySnapshot.of(merged)
            self._loaded_years.add(year)
            self.store.save(merged)
            logger.info("[sync][merged] year=%s fetched=%s total=%s", year, len(batch), len(merged))

    def _fetch_year(self, year: int) -> List[Activity]:
        token = self.session.get_token()
        batch: List[Activity] = []
        for page in range(self.max_pages):
            records = self.client.search_activities(
                token,
                start_date=f"{year}-01-01",
                end_date=f"{year}-12-31",
                limit=self.page_size,
                start=page * self.page_size,
            )
            batch.extend(parse_activity_list(records))
            if len(records) < self.page_size:
                break
        else:
            logger.warning("[sync][page-cap] year=%s pages=%s, older records may be missing", year, self.max_pages)
        return batch

    def load_more(self) -> None:
        """向前再加载一年（由滚动到底部触发）。"""
        years = self.loaded_years
        oldest = min(years) if years else self.today().year
        next_year = oldest - 1
        if next_year < self.min_history_year:
            logger.debug("[sync][load-more] reached min history year %s", self.min_history_year)
            return
        self.ensure_data_loaded(next_year)

    def refresh_data(self) -> None:
        """手动同步：清空内存后强制重新拉取今年。"""
        with self._write_lock:
            self._loaded_years.clear()
            self._snapshot = ActivitySnapshot()
        self.ensure_data_loaded(self.today().year, force_refresh=True)

    # ------------------------------------------------------------------
    # 读取
    # ------------------------------------------------------------------
    def _ensure_years(self, *years: int) -> None:
        for year in sorted(set(years), reverse=True):
            self.ensure_data_loaded(year)

    def get_all_activities(self) -> List[Activity]:
        self.ensure_data_loaded()
        return list(self.activities)

    def get_activities_for_week(self, week_start: date) -> List[Activity]:
        week_end = week_start + timedelta(days=6)
        self._ensure_years(week_start.year, week_end.year)
        return activities_between(self.activities, week_start, week_end)

    def get_weekly_summary(self, week_start: date) -> WeeklySummary:
        self._ensure_years(week_start.year, (week_start + timedelta(days=6)).year)
        return weekly_summary(self.activities, week_start)

    def get_monthly_summary(self, year: int, month: int) -> MonthlySummary:
        self.ensure_data_loaded(year)
        return monthly_summary(self.activities, year, month)

    def get_yearly_summary(self, year: int) -> YearlySummary:
        self.ensure_data_loaded(year)
        return yearly_summary(self.activities, year)

    def get_activity_detail(self, activity_id: str) -> Optional[ActivityDetail]:
        """缓存中找不到概要时直接返回 None（不发请求）。"""
        self.ensure_cache_loaded()
        summary = self._snapshot.by_id.get(str(activity_id))
        if summary is None:
            logger.info("[sync][detail-miss] activity_id=%s not in cache", activity_id)
            return None
        return self.detail_service.fetch(summary)
