"""
pytest配置文件，定义测试环境和共享的测试夹具（fixtures）。

主要功能：
1. 提供一个按脚本应答的假佳明客户端（不访问网络）
2. 提供佳明活动原始记录的构造函数
3. 组装使用临时缓存文件的同步服务
4. 提供FastAPI测试客户端（依赖覆盖为测试用同步服务）
"""

from datetime import date
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from digswim.clients.garmin_client import GarminApiError
from digswim.infrastructure.activity_store import ActivityFileStore
from digswim.infrastructure.credentials import StaticCredentialsProvider
from digswim.infrastructure.session_state import SessionState
from digswim.main import app
from digswim.services.auth_service import GarminAuthService
from digswim.services.sync_service import SwimSyncService
from digswim.utils import get_sync_service


SSO_HTML = '<form><input type="hidden" name="_csrf" value="sso-csrf-1"></form>'
LOGIN_BODY = '<script>var response_url = "https://connect.garmin.cn/modern?ticket=ST-0123-abc";</script>'
DASHBOARD_HTML = '<script>window.VIEWER = {}; CSRF_TOKEN = "connect-token-9";</script>'


def make_record(activity_id, start, distance=1000.0, duration=1500.0, speed=0.8,
                hr=None, swolf=None, strokes=None, type_key="lap_swimming", name="泳池游泳"):
    """构造一条活动搜索接口返回的原始记录。"""
    return {
        "activityId": activity_id,
        "activityName": name,
        "startTimeLocal": start,
        "distance": distance,
        "duration": duration,
        "calories": 250.0,
        "averageHR": hr,
        "averageSpeed": speed,
        "averageSwolf": swolf,
        "strokes": strokes,
        "activityType": {"typeKey": type_key, "typeId": 27},
    }


class FakeGarminClient:
    """按脚本应答的佳明客户端，记录每次调用。"""

    def __init__(self, records_by_year=None, splits=None):
        self.records_by_year = records_by_year or {}
        self.splits = splits or {}
        self.sso_html = SSO_HTML
        self.login_url = "https://sso.garmin.cn/sso/embed"
        self.login_body = LOGIN_BODY
        self.dashboard_html = DASHBOARD_HTML
        self.search_error = None
        self.splits_error = None
        self.calls = []

    def get_sso_page(self):
        self.calls.append(("sso",))
        return self.sso_html

    def submit_credentials(self, email, password, csrf_token):
        self.calls.append(("login", email, csrf_token))
        return SimpleNamespace(url=self.login_url, text=self.login_body)

    def exchange_ticket(self, ticket):
        self.calls.append(("ticket", ticket))

    def get_dashboard(self):
        self.calls.append(("dashboard",))
        return self.dashboard_html

    def search_activities(self, token, start_date, end_date, limit, start=0, activity_type="swimming"):
        self.calls.append(("search", start_date, end_date, limit, start))
        if self.search_error is not None:
            raise self.search_error
        records = self.records_by_year.get(int(start_date[:4]), [])
        return records[start:start + limit]

    def get_activity_splits(self, token, activity_id):
        self.calls.append(("splits", activity_id))
        if self.splits_error is not None:
            raise self.splits_error
        if activity_id not in self.splits:
            raise GarminApiError(404, "not found")
        return self.splits[activity_id]

    def count(self, kind):
        return sum(1 for call in self.calls if call[0] == kind)


@pytest.fixture
def fake_client():
    return FakeGarminClient()


@pytest.fixture
def cache_file(tmp_path):
    return tmp_path / "swim_activities_cache.json"


@pytest.fixture
def make_service(fake_client, cache_file):
    """按需组装同步服务；today 固定为 2025-06-18（周三）。"""
    def _make(client=None, email="swimmer@example.com", password="secret",
              today=date(2025, 6, 18), min_history_year=2015, page_size=100, token=""):
        client = client or fake_client
        session = SessionState(token)
        auth = GarminAuthService(client, session, StaticCredentialsProvider(email, password))
        return SwimSyncService(
            client=client,
            session=session,
            auth=auth,
            store=ActivityFileStore(str(cache_file)),
            today=lambda: today,
            min_history_year=min_history_year,
            page_size=page_size,
        )
    return _make


@pytest.fixture
def api_client(make_service):
    """提供FastAPI测试客户端，依赖覆盖为测试用同步服务"""
    service = make_service()
    app.dependency_overrides[get_sync_service] = lambda: service
    with TestClient(app) as test_client:
        test_client.service = service
        yield test_client
    app.dependency_overrides.clear()
