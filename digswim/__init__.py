"""digswim：佳明（Garmin Connect）游泳数据同步核心。"""

__version__ = "0.3.0"
