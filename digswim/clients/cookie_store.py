"""Cookie 存储

作为 requests.Session 的 cookie jar 使用：
- 跟随跳转时每一跳的 Set-Cookie 都经由 `save` 写入；
- 同名同域同路径的 cookie 直接覆盖；
- 读取（`load` 或迭代）时顺带清理已过期的 cookie；
- 所有读写都在 jar 自带的可重入锁内完成，多个请求并发时安全。

不做跨进程持久化，进程重启后重新登录即可。
"""

import logging
import time
from http.cookiejar import Cookie
from typing import Iterable, List, Mapping, Union
from urllib.parse import urlparse

from requests.cookies import RequestsCookieJar, create_cookie

logger = logging.getLogger(__name__)


def _domain_matches(cookie: Cookie, host: str) -> bool:
    domain = (cookie.domain or "").lower()
    if not domain or not host:
        return False
    if domain.startswith("."):
        return host == domain[1:] or host.endswith(domain)
    if host == domain:
        return True
    # host-only cookie 只匹配原始主机
    return bool(cookie.domain_specified) and host.endswith("." + domain)


def _host_only_cookie(name: str, value: str, host: str) -> Cookie:
    # create_cookie 总是把非空 domain 视为显式指定，这里改回仅限原始主机
    cookie = create_cookie(name, value, domain=host, path="/")
    cookie.domain_specified = False
    cookie.domain_initial_dot = False
    return cookie


def _path_matches(cookie_path: str, request_path: str) -> bool:
    if not cookie_path or cookie_path == "/":
        return True
    if request_path == cookie_path:
        return True
    if request_path.startswith(cookie_path):
        return cookie_path.endswith("/") or request_path[len(cookie_path)] == "/"
    return False


class CookieStore(RequestsCookieJar):
    """线程安全、读时清理过期项的 cookie jar。"""

    def save(self, url: str, cookies: Union[Iterable[Cookie], Mapping[str, str]]) -> None:
        """合并新 cookie；(name, domain, path) 相同的旧值被替换。

        参数：
            url: 产生这些 cookie 的请求地址（mapping 形式时用作默认域）
            cookies: Cookie 对象序列，或 {name: value} 字典
        """
        host = (urlparse(url).hostname or "").lower()
        if isinstance(cookies, Mapping):
            cookies = [_host_only_cookie(name, value, host) for name, value in cookies.items()]
        with self._cookies_lock:
            count = 0
            for cookie in cookies:
                self.set_cookie(cookie)
                count += 1
        if count:
            logger.debug("[cookie-store][save] host=%s count=%s", host, count)

    def load(self, url: str) -> List[Cookie]:
        """返回对 `url` 有效的全部未过期 cookie（按域/路径规则匹配）。"""
        parsed = urlparse(url)
        host = (parsed.hostname or "").lower()
        path = parsed.path or "/"
        is_secure = parsed.scheme == "https"
        with self._cookies_lock:
            self._evict_expired(time.time())
            return [
                cookie for cookie in self._iter_stored()
                if _domain_matches(cookie, host)
                and _path_matches(cookie.path, path)
                and (is_secure or not cookie.secure)
            ]

    def extract_cookies(self, response, request):
        with self._cookies_lock:
            cookies = [
                cookie for cookie in self.make_cookies(response, request)
                if self._policy.set_ok(cookie, request)
            ]
        self.save(request.get_full_url(), cookies)

    def __iter__(self):
        with self._cookies_lock:
            self._evict_expired(time.time())
            snapshot = list(self._iter_stored())
        return iter(snapshot)

    def _iter_stored(self):
        for paths in self._cookies.values():
            for names in paths.values():
                yield from names.values()

    def _evict_expired(self, now: float) -> None:
        expired = [cookie for cookie in self._iter_stored() if cookie.is_expired(now)]
        for cookie in expired:
            self.clear(cookie.domain, cookie.path, cookie.name)
        if expired:
            logger.debug("[cookie-store][evict] expired=%s", len(expired))
