"""
CovidTrack Country Model

国家模型：导入时首次出现即创建，之后不再修改
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class Region(str, Enum):
    """大洲分类"""

    ASIA = "Asia"
    EUROPE = "Europe"
    AMERICAS = "Americas"
    AFRICA = "Africa"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str) -> Optional["Region"]:
        """按名称（忽略大小写）查找区域，找不到返回 None"""
        for region in cls:
            if region.value.lower() == value.strip().lower():
                return region
        return None


@dataclass
class Country:
    """
    国家

    name 为标准化后的名称，在数据集中唯一；id 按首次出现顺序分配
    """

    id: int
    code: str
    name: str
    region: Region = Region.OTHER
    population: Optional[int] = None
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "region": self.region.value,
            "population": self.population,
            "created_at": self.created_at.isoformat(),
        }

    def __repr__(self) -> str:
        return f"<Country(id={self.id}, code='{self.code}', name='{self.name}')>"
