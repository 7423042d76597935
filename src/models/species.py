from typing import Optional

from pydantic import Field

from src.models.common import ApiModel


class SpeciesCreate(ApiModel):
    common_name: str = Field(min_length=1)
    scientific_name: str = Field(min_length=1)
    classification: Optional[str] = None
    origin: Optional[str] = None
    average_life_span: Optional[float] = Field(default=None, ge=0)
    diet_type: Optional[str] = None
    about: Optional[str] = None


class SpeciesUpdate(ApiModel):
    non_nullable = ("common_name", "scientific_name")

    common_name: Optional[str] = Field(default=None, min_length=1)
    scientific_name: Optional[str] = Field(default=None, min_length=1)
    classification: Optional[str] = None
    origin: Optional[str] = None
    average_life_span: Optional[float] = Field(default=None, ge=0)
    diet_type: Optional[str] = None
    about: Optional[str] = None
