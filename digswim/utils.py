"""
本文件包含服务装配与依赖注入的工具函数。

主要功能：
1. 按配置组装 cookie 存储、佳明客户端、会话、登录、缓存与同步服务
2. 进程内只保留一份同步服务（内存缓存与已加载年份都挂在它上面）
3. FastAPI 依赖注入（测试中可通过 app.dependency_overrides 替换）
"""

import threading
from typing import Optional

from .clients.cookie_store import CookieStore
from .clients.garmin_client import GarminClient
from .infrastructure.activity_store import ActivityFileStore
from .infrastructure.credentials import EnvCredentialsProvider
from .infrastructure.session_state import SessionState
from .services.auth_service import GarminAuthService
from .services.detail_service import ActivityDetailService
from .services.sync_service import SwimSyncService


_service: Optional[SwimSyncService] = None
_service_lock = threading.Lock()


def build_sync_service(credentials_provider=None, cache_file: Optional[str] = None) -> SwimSyncService:
    """组装一套完整的同步服务对象图。"""
    client = GarminClient(cookie_store=CookieStore())
    session = SessionState()
    auth = GarminAuthService(client, session, credentials_provider or EnvCredentialsProvider())
    return SwimSyncService(
        client=client,
        session=session,
        auth=auth,
        store=ActivityFileStore(cache_file),
        detail_service=ActivityDetailService(client, session, auth),
    )


def get_sync_service() -> SwimSyncService:
    """FastAPI 依赖项：获取进程级同步服务。"""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                _service = build_sync_service()
    return _service
