"""
Admin Authentication Request/Response Models
"""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    admin_key: str = Field(default="", alias="adminKey")

    class Config:
        populate_by_name = True


class LoginResponse(BaseModel):
    success: bool = True
    message: str
    access_token: str
