import datetime as dt
from typing import List
from pydantic import BaseModel


class KpisOut(BaseModel):
    total: int
    cleaned: int
    avg_cleanup_time_hours: float


class OverTimePoint(BaseModel):
    date: dt.date
    count: int


class CategoryCount(BaseModel):
    category: str
    count: int


class LocationOut(BaseModel):
    lat: float
    lng: float


class StatsResponse(BaseModel):
    kpis: KpisOut
    overTime: List[OverTimePoint] = []
    byCategory: List[CategoryCount] = []
    locations: List[LocationOut] = []
