"""
应用配置中心（Configuration Center）

说明（强烈建议先快速浏览）：
- 本模块统一管理同步核心的运行配置（日志、缓存目录、佳明接口地址、账号等）
- 配置优先从环境变量中读取，避免硬编码敏感信息；必要时提供安全的默认值
- 读取顺序：环境变量（优先） > 安全默认

常用环境变量（全部可选）：
1) 日志与缓存
   - `LOG_LEVEL`：日志等级，默认 INFO（可选 DEBUG/INFO/WARN/ERROR 等）
   - `SWIM_CACHE_DIR`：活动缓存文件落盘目录，默认 `./data/swim_cache`

2) 佳明（Garmin Connect）相关
   - `GARMIN_SSO_URL`：SSO 登录服务地址，默认 https://sso.garmin.cn/sso
   - `GARMIN_CONNECT_URL`：Connect 站点地址，默认 https://connect.garmin.cn
   - `GARMIN_TIMEOUT`：单次 HTTP 请求超时时间（秒），默认 30
   - `GARMIN_EMAIL` / `GARMIN_PASSWORD`：登录账号，任一缺失视为“未绑定”

3) 同步分页
   - `MIN_HISTORY_YEAR`：向前翻页的最早年份，默认 2015
   - `ACTIVITY_PAGE_SIZE`：活动搜索单页条数，默认 100
   - `ACTIVITY_MAX_PAGES`：单个年份最多拉取的页数，默认 10
"""

import os


# 日志（Logging）
# LOG_LEVEL 用于控制 logging 的根等级，详见 digswim/logging_config.py
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

# 缓存（Cache）
# SWIM_CACHE_DIR 为活动列表缓存文件所在目录
SWIM_CACHE_DIR = os.environ.get('SWIM_CACHE_DIR', os.path.join(os.getcwd(), 'data', 'swim_cache'))
SWIM_CACHE_FILE_NAME = "swim_activities_cache.json"

# 佳明调用配置
GARMIN_SSO_URL = os.environ.get('GARMIN_SSO_URL', 'https://sso.garmin.cn/sso').rstrip('/')
GARMIN_CONNECT_URL = os.environ.get('GARMIN_CONNECT_URL', 'https://connect.garmin.cn').rstrip('/')
# GARMIN_TIMEOUT 为单次 HTTP 请求超时（秒）
GARMIN_TIMEOUT = int(os.environ.get('GARMIN_TIMEOUT', '30'))

# 同步分页
MIN_HISTORY_YEAR = int(os.environ.get('MIN_HISTORY_YEAR', '2015'))
ACTIVITY_PAGE_SIZE = int(os.environ.get('ACTIVITY_PAGE_SIZE', '100'))
ACTIVITY_MAX_PAGES = int(os.environ.get('ACTIVITY_MAX_PAGES', '10'))


def get_cache_file_path() -> str:
    """活动缓存文件的完整路径。"""
    return os.path.join(SWIM_CACHE_DIR, SWIM_CACHE_FILE_NAME)


def get_garmin_credentials():
    """
    读取佳明账号。

    返回：
        (email, password) 元组；任一为空时返回 None，表示尚未绑定账号。
    """
    email = os.environ.get('GARMIN_EMAIL', '').strip()
    password = os.environ.get('GARMIN_PASSWORD', '')
    if not email or not password:
        return None
    return email, password
