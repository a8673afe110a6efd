"""
AI model catalog document.

Reference data seeded at startup. The only field that mutates at runtime is
`usage_stats`, updated after every admitted generation.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from studio.models.base import Document, utcnow

ModelCategory = Literal["audio", "video", "image", "text", "3d", "multimodal"]


class Restrictions(BaseModel):
    min_user_level: Literal["free", "basic", "pro", "enterprise"] = "free"
    max_daily_uses: Optional[int] = None
    requires_approval: bool = False


class Parameter(BaseModel):
    name: str
    display_name: Optional[str] = None
    description: Optional[str] = None
    type: Literal["number", "string", "boolean", "array", "object", "enum"] = "string"
    default_value: Any = None
    min_value: Any = None
    max_value: Any = None
    step: Optional[float] = None
    options: List[Any] = Field(default_factory=list)
    is_required: bool = False


class UsageStats(BaseModel):
    """
    Running usage statistics.

    Averages use the incremental mean:
        new_avg = (old_avg * (n - 1) + sample) / n
    where n is total_usage AFTER the increment. Every sample is folded in,
    zero included, so after n samples each average equals sum(samples) / n.
    """

    total_usage: int = 0
    usage_by_day: Dict[str, int] = Field(default_factory=dict)
    usage_by_user: Dict[str, int] = Field(default_factory=dict)
    average_processing_time: float = 0.0
    average_token_count: float = 0.0
    average_cost: float = 0.0
    last_used: Optional[datetime] = None

    @staticmethod
    def _fold(old_avg: float, sample: float, n: int) -> float:
        return (old_avg * (n - 1) + sample) / n

    def record(
        self,
        user_id: Optional[str],
        processing_time: float,
        token_count: float,
        cost: float,
    ) -> None:
        self.total_usage += 1
        n = self.total_usage
        now = utcnow()
        self.last_used = now

        day = now.date().isoformat()
        self.usage_by_day[day] = self.usage_by_day.get(day, 0) + 1
        if user_id:
            self.usage_by_user[user_id] = self.usage_by_user.get(user_id, 0) + 1

        self.average_processing_time = self._fold(self.average_processing_time, processing_time, n)
        self.average_token_count = self._fold(self.average_token_count, token_count, n)
        self.average_cost = self._fold(self.average_cost, cost, n)


class AIModel(Document):
    name: str
    display_name: str
    description: str = ""
    type: str
    provider: str = "internal"
    category: ModelCategory
    tags: List[str] = Field(default_factory=list)
    is_public: bool = True
    is_active: bool = True
    is_featured: bool = False
    current_version: str = "1.0.0"
    default_parameters: List[Parameter] = Field(default_factory=list)
    input_formats: List[str] = Field(default_factory=list)
    output_formats: List[str] = Field(default_factory=list)
    cost_per_use: float = 0.0
    credits_per_use: int = Field(default=1, ge=0)
    restrictions: Restrictions = Field(default_factory=Restrictions)
    usage_stats: UsageStats = Field(default_factory=UsageStats)

    def __repr__(self) -> str:
        return f"<AIModel(id={self.id}, name='{self.name}', type='{self.type}')>"
