from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class ProductCreate(BaseModel):
    # Presence is checked by the service so a missing field answers 400
    name: Optional[str] = Field(None, description="Product name")
    attributes: Optional[str] = Field(None, description="Comma-separated product keywords")


class ProductUpdate(BaseModel):
    description: Optional[str] = Field(None, description="Product description")


class Product(BaseModel):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: int
    name: str
    attributes: str
    description: Optional[str] = None
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Creation timestamp")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = Field(..., description="System status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")
