from pydantic import BaseModel, Field


class RoomCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    capacity: int | None = Field(default=None, ge=1, le=1000)
    building: str | None = Field(default=None, max_length=200)
    floor: int | None = Field(default=None, ge=-5, le=200)
    features: list[str] = Field(default_factory=list, max_length=50)


class RoomOut(BaseModel):
    id: str
    name: str
    capacity: int | None = None
    building: str | None = None
    floor: int | None = None
    features: list[str] = Field(default_factory=list)

    model_config = {"from_attributes": True}
