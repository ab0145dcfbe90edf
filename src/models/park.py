from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Activity(BaseModel):
    """Something to do at a park. Scraped data spells the name key as 'Name'."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(validation_alias=AliasChoices("name", "Name"))
    description: str = ""

    @field_validator("description", mode="before")
    @classmethod
    def none_description_to_empty(cls, value):
        return "" if value is None else value


class ParkCreate(BaseModel):
    """Fields a caller supplies when creating or updating a park."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    state_code: str = Field(alias="stateCode")
    park_url: Optional[str] = Field(default=None, alias="parkURL")
    latitude: float
    longitude: float
    activities: List[Activity] = Field(default_factory=list)

    @field_validator("activities", mode="before")
    @classmethod
    def none_activities_to_empty(cls, value):
        # A park without activities always carries an empty list
        return [] if value is None else value


class Park(ParkCreate):
    """A stored park, including the identity fields assigned by a repository."""
    id: str = ""
    park_code: str = Field(default="", alias="parkCode")

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, value):
        return "" if value is None else str(value)

    @classmethod
    def from_create(cls, park, park_id, park_code):
        return cls(
            id=park_id,
            park_code=park_code,
            name=park.name,
            state_code=park.state_code,
            park_url=park.park_url,
            latitude=park.latitude,
            longitude=park.longitude,
            activities=[activity.model_copy() for activity in park.activities],
        )
