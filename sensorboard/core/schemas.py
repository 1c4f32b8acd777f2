# -*- coding: utf-8 -*-
# sensorboard/core/schemas.py - Pydantic models for API requests and responses
from pydantic import BaseModel
from typing import List, Optional

from sensorboard.core.models import Range


class ErrorDTO(BaseModel):
    error: str
    details: Optional[str] = None


class RelayDTO(BaseModel):
    id: Optional[int] = None
    reported_status: str
    mode: str
    manual_since: Optional[str] = None
    updated_at: Optional[str] = None


class SummaryCardDTO(BaseModel):
    value: Optional[float] = None
    time: Optional[str] = None
    status: str


class ChartPointDTO(BaseModel):
    time: str
    label: str
    celcius: Optional[float] = None
    humidity: Optional[float] = None


class ChartDTO(BaseModel):
    range: Range
    points: List[ChartPointDTO]


class DashboardDTO(BaseModel):
    range: Range
    temperature: SummaryCardDTO
    humidity: SummaryCardDTO
    chart: ChartDTO
    relay: Optional[RelayDTO] = None
    busy: bool
    error: Optional[str] = None


class RangeSelectDTO(BaseModel):
    range: Range
