"""
Garmin Auth Service（佳明登录服务）

职责：
- 驱动佳明网页 SSO 登录流程，拿到后续接口所需的 connect-csrf-token
- 把令牌写入 SessionState

流程（任一步失败即中止，返回 False，不向调用方抛异常）：
1. 获取 SSO 登录页，提取初始 `_csrf`
2. 提交账号密码 + `_csrf`
3. 提取 service ticket：先看跟随跳转后的最终 URL，再解析响应正文
4. 拿到 ticket 时显式访问兑换地址（部分部署必须这一步才会下发会话 cookie）
5. 获取 Connect 首页，提取 connect-csrf-token（JS 变量优先，HTML 属性兜底）
6. 写入会话，返回 True
"""

import logging
import threading

from ..analyzers.garmin.tokens import (
    extract_connect_token,
    extract_csrf_token,
    extract_service_ticket,
)
from ..clients.garmin_client import GarminClient
from ..infrastructure.session_state import SessionState
from ..logging_config import mask_secret

logger = logging.getLogger(__name__)


class GarminAuthService:
    """佳明 SSO 登录服务"""

    def __init__(self, client: GarminClient, session: SessionState, credentials_provider):
        self.client = client
        self.session = session
        self.credentials_provider = credentials_provider
        # 多个调用方同时触发登录时串行执行，避免交错写入同一个 cookie jar
        self._lock = threading.Lock()

    def login(self) -> bool:
        """无条件执行一次完整登录（令牌被拒后重新登录用）；成功返回 True。"""
        return self._login(force=True)

    def ensure_session(self) -> bool:
        """
        已有令牌直接返回 True，否则尝试登录。

        并发调用时只有拿到锁的第一个调用方真正走登录流程，
        其余调用方拿到锁后发现令牌已写入，直接返回。
        """
        if self.session.has_session():
            return True
        return self._login(force=False)

    def _login(self, force: bool) -> bool:
        credentials = self.credentials_provider.get_credentials()
        if credentials is None:
            logger.warning("[auth][no-credentials] Garmin account not bound, skip login")
            return False

        with self._lock:
            if not force and self.session.has_session():
                logger.debug("[auth][skip] session established while waiting")
                return True
            try:
                return self._run_flow(credentials.email, credentials.password)
            except Exception:
                logger.exception("[auth][error] login flow aborted for %s", credentials.email)
                return False

    def _run_flow(self, email: str, password: str) -> bool:
        # 1. SSO 登录页
        sso_html = self.client.get_sso_page()
        csrf_token = extract_csrf_token(sso_html)
        if not csrf_token:
            logger.error("[auth][step1][csrf-missing] sso page length=%s", len(sso_html or ""))
            return False

        # 2. 提交账号密码
        login_resp = self.client.submit_credentials(email, password, csrf_token)

        # 3. service ticket
        ticket = extract_service_ticket(login_resp.url, login_resp.text)

        # 4. 显式兑换 ticket
        if ticket:
            logger.info("[auth][step4][ticket] ticket=%s", mask_secret(ticket, visible=8))
            self.client.exchange_ticket(ticket)
        else:
            logger.info("[auth][step4][no-ticket] relying on cookies from redirects")

        # 5. Connect 首页令牌
        dashboard_html = self.client.get_dashboard()
        token = extract_connect_token(dashboard_html)
        if not token:
            logger.error("[auth][step5][token-missing] dashboard length=%s", len(dashboard_html or ""))
            return False

        # 6. 写入会话
        self.session.set_token(token)
        logger.info("[auth][success] email=%s token=%s", email, mask_secret(token))
        return True
