# app/schemas/users/user.py
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any


class UpdateProfileRequest(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=150, alias="fullName")
    company_name: Optional[str] = Field(None, min_length=1, max_length=150, alias="companyName")
    phone_number: Optional[str] = Field(None, min_length=1, max_length=40, alias="phoneNumber")
    location: Optional[str] = Field(None, max_length=150)
    time_zone: Optional[str] = Field(None, max_length=64, alias="timeZone")

    class Config:
        populate_by_name = True

    def to_updates(self) -> Dict[str, Any]:
        """Only the fields the client actually sent; an explicit null clears a nullable field."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class UpdateProfilePhotoRequest(BaseModel):
    profile_photo: Optional[str] = Field(..., max_length=500, alias="profilePhoto")

    class Config:
        populate_by_name = True
