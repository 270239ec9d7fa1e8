"""佳明 Connect 客户端（网页接口封装）

功能：
- 佳明没有公开 API，这里模拟浏览器访问 SSO 登录页与 Connect 站内代理接口；
- 所有请求共享同一个 CookieStore，跟随跳转时的 cookie 也会落入其中；
- 按目标主机区分请求头：Connect 接口带 sec-fetch/client-hint 头，SSO 页面带导航类头；
- 非 2xx 统一抛 GarminApiError，401/403 抛 GarminAuthError。
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlparse
import logging

import requests
from requests.structures import CaseInsensitiveDict

from ..config import GARMIN_CONNECT_URL, GARMIN_SSO_URL, GARMIN_TIMEOUT
from .cookie_store import CookieStore


logger = logging.getLogger(__name__)


USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/143.0.0.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,image/avif,image/webp,"
        "image/apng,*/*;q=0.8,application/signed-exchange;v=b3;q=0.7"
    ),
    "Accept-Language": "en-US,en;q=0.9,zh-CN;q=0.8,zh;q=0.7",
    "Connection": "keep-alive",
}

CONNECT_API_HEADERS = {
    "Accept": "*/*",
    "Accept-Language": "en,und;q=0.9,zh-CN;q=0.8,zh;q=0.7,ja;q=0.6",
    "priority": "u=1, i",
    "sec-ch-ua": '"Google Chrome";v="143", "Chromium";v="143", "Not A(Brand";v="24"',
    "sec-ch-ua-mobile": "?0",
    "sec-ch-ua-platform": '"macOS"',
    "sec-fetch-dest": "empty",
    "sec-fetch-mode": "cors",
    "sec-fetch-site": "same-origin",
}

SSO_NAVIGATION_HEADERS = {
    "NK": "NT",
    "sec-fetch-dest": "document",
    "sec-fetch-mode": "navigate",
    "sec-fetch-site": "none",
    "sec-fetch-user": "?1",
    "Upgrade-Insecure-Requests": "1",
}

ACTIVITY_SEARCH_PATH = "/modern/proxy/activitylist-service/activities/search/activities"
ACTIVITY_SPLITS_PATH = "/modern/proxy/activity-service/activity/{activity_id}/splits"
TOKEN_HEADER = "connect-csrf-token"


class GarminApiError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"Garmin API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class GarminAuthError(GarminApiError):
    """已登录接口被拒（401/403），需要重新走登录流程。"""


def build_headers(url: str, connect_url: str = GARMIN_CONNECT_URL) -> CaseInsensitiveDict:
    """按目标主机生成浏览器风格请求头。"""
    headers = CaseInsensitiveDict(BROWSER_HEADERS)
    host = (urlparse(url).hostname or "").lower()
    connect_host = (urlparse(connect_url).hostname or "").lower()
    if host == connect_host:
        headers.update(CONNECT_API_HEADERS)
        headers["referer"] = f"{connect_url}/modern/"
    else:
        headers.update(SSO_NAVIGATION_HEADERS)
    return headers


class GarminClient:
    def __init__(
        self,
        cookie_store: Optional[CookieStore] = None,
        sso_url: str = GARMIN_SSO_URL,
        connect_url: str = GARMIN_CONNECT_URL,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        self.sso_url = sso_url.rstrip("/")
        self.connect_url = connect_url.rstrip("/")
        self.timeout = timeout or GARMIN_TIMEOUT
        self.cookies = cookie_store if cookie_store is not None else CookieStore()
        self.session = session or requests.Session()
        self.session.cookies = self.cookies

    def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """内部请求封装：跟随跳转；401/403 抛 GarminAuthError，其他非 2xx 抛 GarminApiError。"""
        headers = build_headers(url, self.connect_url)
        if token:
            headers[TOKEN_HEADER] = token
        if extra_headers:
            headers.update(extra_headers)
        resp = self.session.request(
            method,
            url,
            params=params,
            data=data,
            headers=headers,
            timeout=self.timeout,
            allow_redirects=True,
        )
        logger.debug(
            "[garmin-client][%s] url=%s status=%s redirects=%s",
            method, url, resp.status_code, len(resp.history),
        )
        if resp.status_code in (401, 403):
            raise GarminAuthError(resp.status_code, resp.text[:200])
        if not resp.ok:
            raise GarminApiError(resp.status_code, resp.text[:200])
        return resp

    def sso_params(self) -> Dict[str, str]:
        """SSO 登录页/提交接口共用的查询参数。"""
        return {
            "service": f"{self.connect_url}/modern",
            "webauth-html": "true",
            "webauth-urls": "true",
            "gauth-host": self.sso_url,
            "source": f"{self.connect_url}/signin",
            "redirectAfterAccountLoginUrl": f"{self.connect_url}/modern",
        }

    def get_sso_page(self) -> str:
        """获取 SSO 登录页 HTML（包含初始 _csrf）。"""
        return self._request("GET", f"{self.sso_url}/signin", params=self.sso_params()).text

    def submit_credentials(self, email: str, password: str, csrf_token: str) -> requests.Response:
        """提交账号密码；返回最终（跟随跳转后）的响应，供提取 service ticket。"""
        parsed = urlparse(self.sso_url)
        return self._request(
            "POST",
            f"{self.sso_url}/signin",
            params=self.sso_params(),
            data={
                "username": email,
                "password": password,
                "embed": "true",
                "_csrf": csrf_token,
            },
            extra_headers={"origin": f"{parsed.scheme}://{parsed.netloc}"},
        )

    def exchange_ticket(self, ticket: str) -> None:
        """显式访问 ticket 兑换地址，确保服务端下发会话 cookie。"""
        self._request("GET", f"{self.connect_url}/modern", params={"ticket": ticket})

    def get_dashboard(self) -> str:
        """获取 Connect 首页 HTML（包含 connect-csrf-token）。"""
        return self._request("GET", f"{self.connect_url}/modern/").text

    def search_activities(
        self,
        token: str,
        start_date: str,
        end_date: str,
        limit: int,
        start: int = 0,
        activity_type: str = "swimming",
    ) -> List[Dict[str, Any]]:
        """按日期窗口搜索活动（日期格式 YYYY-MM-DD）。"""
        params = {
            "activityType": activity_type,
            "startDate": start_date,
            "endDate": end_date,
            "limit": limit,
            "start": start,
            "excludeChildren": "false",
        }
        payload = self._request(
            "GET", f"{self.connect_url}{ACTIVITY_SEARCH_PATH}", params=params, token=token
        ).json()
        if not isinstance(payload, list):
            raise ValueError(f"unexpected activity list payload: {type(payload).__name__}")
        return payload

    def get_activity_splits(self, token: str, activity_id: int) -> Dict[str, Any]:
        """获取活动的分趟 / 分长度数据。"""
        path = ACTIVITY_SPLITS_PATH.format(activity_id=activity_id)
        payload = self._request("GET", f"{self.connect_url}{path}", token=token).json()
        if not isinstance(payload, dict):
            raise ValueError(f"unexpected splits payload: {type(payload).__name__}")
        return payload
