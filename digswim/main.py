"""
DigSwim 游泳数据同步 API 主应用文件。

本文件是FastAPI应用的入口点，负责：
1. 初始化日志
2. 创建FastAPI应用实例
3. 注册游泳数据路由

启动命令: uvicorn digswim.main:app --reload
"""

from fastapi import FastAPI
from .logging_config import setup_logging
from .config import LOG_LEVEL

from .api.swims import router as swims_router

setup_logging(LOG_LEVEL)
app = FastAPI(title="DigSwim 游泳数据同步 API")

# 路由注册
app.include_router(swims_router, tags=["游泳"])
