"""登录会话状态

只保存一个 connect-csrf-token；非空即视为“已登录”。
不跟踪过期：已登录接口返回 401/403 时由调用方重新走登录流程并覆盖令牌。
"""

import threading


class SessionState:
    def __init__(self, token: str = ""):
        self._token = token or ""
        self._lock = threading.Lock()

    def set_token(self, value: str) -> None:
        """覆盖令牌（后写者生效）。"""
        with self._lock:
            self._token = value or ""

    def get_token(self) -> str:
        with self._lock:
            return self._token

    def has_session(self) -> bool:
        return bool(self.get_token())
