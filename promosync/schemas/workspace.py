"""
Workspace record schemas
"""
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from typing import Any, Dict, Optional

from promosync.models.contract import ContractStatus
from promosync.models.application import ApplicationStatus


class ProfileUpdate(BaseModel):
    """Schema for profile create/update"""
    email: Optional[str] = None
    display_name: Optional[str] = None
    platform: Optional[str] = None
    niche: Optional[str] = None


class ProfileResponse(BaseModel):
    id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    platform: Optional[str] = None
    niche: Optional[str] = None
    plan: str = "free"
    updated_at: Optional[datetime] = None


class MediaKitCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    template: str = "modern"
    data: Dict[str, Any] = {}


class MediaKitResponse(BaseModel):
    id: str
    user_id: str
    name: str
    template: str
    data: Dict[str, Any]
    created_at: datetime


class RateCreate(BaseModel):
    """Rate calculator result to keep"""
    followers: int = Field(ge=0)
    avg_viewers: int = Field(default=0, ge=0)
    engagement_rate: float = Field(default=0, ge=0)
    niche: Optional[str] = None
    platform: Optional[str] = None
    calculated_rate: float = Field(ge=0)


class RateResponse(RateCreate):
    id: str
    user_id: str
    created_at: datetime


class PitchCreate(BaseModel):
    brand_name: str = Field(min_length=1, max_length=255)
    template: Optional[str] = None
    pitch_text: str = Field(min_length=1)


class PitchResponse(PitchCreate):
    id: str
    user_id: str
    created_at: datetime


class ContractCreate(BaseModel):
    """Schema for creating a contract"""
    brand_name: str = Field(min_length=1, max_length=255)
    deal_value: float = Field(default=0, ge=0)
    status: ContractStatus = ContractStatus.PENDING
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator('end_date')
    @classmethod
    def validate_end_date(cls, v, info):
        start = info.data.get('start_date')
        if v is not None and start is not None and v < start:
            raise ValueError("end_date must not be before start_date")
        return v


class ContractStatusUpdate(BaseModel):
    status: ContractStatus


class ContractResponse(BaseModel):
    id: str
    user_id: str
    brand_name: str
    deal_value: float
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    created_at: datetime


class ApplicationCreate(BaseModel):
    """Quick apply to a brand campaign"""
    brand_name: str = Field(min_length=1, max_length=255)
    campaign: Optional[str] = None
    message: Optional[str] = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus


class ApplicationResponse(BaseModel):
    id: str
    user_id: str
    brand_name: str
    campaign: Optional[str] = None
    message: Optional[str] = None
    status: str
    created_at: datetime


class UserMetricsResponse(BaseModel):
    user_id: str
    total_revenue: float = 0
    active_deals: int = 0
    brand_matches: int = 0
    avg_deal_value: float = 0
