"""Skill usage statistics aggregated over profiles and resumes."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from models.schemas.layers import TechLayer


class SkillUsageStatisticsRequest(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None
    category: TechLayer | None = None
    sort_by: Literal["frequency", "name"] = "frequency"
    sort_order: Literal["asc", "desc"] = "desc"


class SkillStatistic(BaseModel):
    skill_name: str
    category: TechLayer
    jd_count: int = 0
    resume_count: int = 0
    total_usage: int = 0
    variations: list[str] = []  # raw names that mapped onto skill_name
    variation_usage_count: int = 0
    first_seen: datetime
    last_seen: datetime


class DateRange(BaseModel):
    start: datetime | None = None
    end: datetime | None = None


class SkillUsageStatisticsResponse(BaseModel):
    success: bool
    statistics: list[SkillStatistic] = []
    total_skills: int = 0
    date_range: DateRange = DateRange()
    message: str = ""
