"""活动缓存文件管理器

负责把完整的游泳活动列表持久化到单个 JSON 文件，以及冷启动时读回。
时间字段统一按 `yyyy-MM-dd HH:mm:ss` 编码。
"""

import json
import logging
import os
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import ValidationError

from ..config import get_cache_file_path
from ..schemas.swims import Activity

logger = logging.getLogger(__name__)


class ActivityFileStore:
    def __init__(self, file_path: Optional[str] = None):
        self.file_path = Path(file_path or get_cache_file_path())

    def load(self) -> Optional[List[Activity]]:
        """读取缓存文件

        Returns:
            活动列表；文件不存在或内容无法解析时返回 None
        """
        if not self.file_path.exists():
            logger.info("[activity-store][miss] no cache file at %s", self.file_path)
            return None
        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, list):
                logger.warning("[activity-store][bad-format] expected list, got %s", type(data).__name__)
                return None
            activities = [Activity.model_validate(item) for item in data]
        except (OSError, ValueError, ValidationError) as e:
            logger.exception("[activity-store][load-error] path=%s err=%s", self.file_path, e)
            return None
        logger.info("[activity-store][hit] loaded=%s path=%s", len(activities), self.file_path)
        return activities

    def save(self, activities: Sequence[Activity]) -> bool:
        """整体覆盖写入（先写临时文件再替换，避免半截文件）

        Returns:
            是否保存成功
        """
        tmp_path = self.file_path.with_suffix(self.file_path.suffix + '.tmp')
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            payload = [activity.model_dump(mode='json') for activity in activities]
            with open(tmp_path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.file_path)
        except (OSError, TypeError, ValueError) as e:
            logger.exception("[activity-store][save-error] path=%s err=%s", self.file_path, e)
            return False
        logger.info("[activity-store][save] count=%s path=%s", len(activities), self.file_path)
        return True

