"""
Activity Detail Service（活动详情服务）

职责：
- 确保已登录后拉取单个活动的分段数据
- 重组为 ActivityDetail（分趟列表 + 配速/心率/SWOLF 曲线）

任何失败（未登录、网络、解析）都返回 None，由上层显示“详情不可用”。
"""

from typing import Optional
import logging

from ..analyzers.garmin.splits import build_activity_detail
from ..clients.garmin_client import GarminAuthError, GarminClient
from ..infrastructure.session_state import SessionState
from ..schemas.swims import Activity, ActivityDetail
from .auth_service import GarminAuthService

logger = logging.getLogger(__name__)


class ActivityDetailService:
    """活动详情服务"""

    def __init__(self, client: GarminClient, session: SessionState, auth: GarminAuthService):
        self.client = client
        self.session = session
        self.auth = auth

    def fetch(self, summary: Activity) -> Optional[ActivityDetail]:
        """按活动概要拉取并构建详情。"""
        if not self.auth.ensure_session():
            logger.warning("[detail][no-session] activity_id=%s", summary.id)
            return None

        try:
            payload = self.client.get_activity_splits(self.session.get_token(), int(summary.id))
        except GarminAuthError as e:
            logger.warning("[detail][auth-rejected] activity_id=%s status=%s, re-login", summary.id, e.status_code)
            self.auth.login()
            return None
        except Exception:
            logger.exception("[detail][fetch-error] activity_id=%s", summary.id)
            return None

        try:
            detail = build_activity_detail(summary, payload)
        except Exception:
            logger.exception("[detail][parse-error] activity_id=%s", summary.id)
            return None

        logger.info(
            "[detail][built] activity_id=%s laps=%s pace_points=%s",
            summary.id, len(detail.laps), len(detail.metrics.pace),
        )
        return detail
