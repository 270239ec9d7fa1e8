"""
日志初始化（Logging Bootstrap）

说明：
- 统一初始化根日志记录器（root logger），设置格式与日志等级；
- 等级从显式传入 `level` 或环境变量 `LOG_LEVEL` 读取，默认 INFO；
- urllib3 的连接日志默认压到 WARNING，避免 SSO 多次跳转刷屏；
- 令牌、票据等敏感值写日志前统一经过 `mask_secret` 脱敏。
"""

import logging
import os
from typing import Optional


def setup_logging(level: str = None) -> None:
    """
    初始化全局日志配置。

    参数：
        level: 可选的日志等级（字符串）。若未提供，则读取环境变量 LOG_LEVEL（默认 INFO）。
    """
    log_level = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    if log_level != 'DEBUG':
        logging.getLogger('urllib3').setLevel(logging.WARNING)


def mask_secret(value: Optional[str], visible: int = 4) -> str:
    """只保留前 `visible` 位，其余以 * 代替；空值返回 '<empty>'。"""
    if not value:
        return '<empty>'
    if len(value) <= visible:
        return '*' * len(value)
    return value[:visible] + '*' * (len(value) - visible)
