"""佳明账号来源

登录流程开始时读取一次；返回 None 表示尚未绑定账号，此时不发起任何网络请求。
"""

from dataclasses import dataclass
from typing import Optional

from ..config import get_garmin_credentials


@dataclass(frozen=True)
class GarminCredentials:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"GarminCredentials(email={self.email!r}, password='***')"


class EnvCredentialsProvider:
    """从环境变量 GARMIN_EMAIL / GARMIN_PASSWORD 读取。"""

    def get_credentials(self) -> Optional[GarminCredentials]:
        pair = get_garmin_credentials()
        if pair is None:
            return None
        return GarminCredentials(email=pair[0], password=pair[1])


class StaticCredentialsProvider:
    """固定账号（嵌入式调用或测试时使用）。"""

    def __init__(self, email: Optional[str], password: Optional[str]):
        self._email = (email or "").strip()
        self._password = password or ""

    def get_credentials(self) -> Optional[GarminCredentials]:
        if not self._email or not self._password:
            return None
        return GarminCredentials(email=self._email, password=self._password)
