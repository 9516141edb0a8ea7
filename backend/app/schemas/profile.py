"""
Profile schemas.

Profiles are created and updated with multipart forms (they carry a
photo upload), so only responses and the JSON category-link request are
modeled here. Form parsing lives in the profiles router.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.catalog import CategoryResponse


class ProfileResponse(BaseModel):
    """
    A profile.

    Example response:
        {
            "id": 7,
            "user_id": "0b6c6f0e-8f3b-4d4e-9a52-2f1d3c5e8a90",
            "name": "Mia",
            "date_of_birth": "2018-04-02",
            "gender": false,
            "photo_url": "https://cdn.example.com/avatar/2024/01/0b6c...-a1b2c3d4.png",
            "age": 6
        }
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    name: str
    date_of_birth: Optional[date] = None
    gender: Optional[bool] = None
    photo_url: Optional[str] = None
    age: Optional[int] = Field(None, description="Whole years, derived from date_of_birth")
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(ProfileResponse):
    categories: list[CategoryResponse] = Field(default_factory=list)


class ProfileCategoryCreate(BaseModel):
    category_id: int = Field(..., description="Category to link to the profile")


class ProfileCategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    profile_id: int
    category_id: int
    created_at: datetime


class DeletedCounts(BaseModel):
    """How many rows of each dependent kind were removed, and whether a photo existed."""
    playlist_stories: int
    playlists: int
    favorites: int
    profile_categories: int
    photo: bool


class ProfileDeleteResponse(BaseModel):
    message: str = "Profile deleted successfully"
    id: int
    deleted: DeletedCounts
