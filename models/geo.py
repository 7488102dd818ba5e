from pydantic import BaseModel, ConfigDict, Field

class GeoPoint(BaseModel):
    """
    A (latitude, longitude) pair used in geo search. Immutable; two points are
    equal when both coordinates are equal.
    """
    model_config = ConfigDict(frozen=True)

    lat: float = Field(..., allow_inf_nan=False, description="Latitude")
    lng: float = Field(..., allow_inf_nan=False, description="Longitude")

class GeoRect(BaseModel):
    """
    A rectangle in geo coordinates, given by two opposite corners.

    p1 is typically the north-westernmost corner and p2 the south-easternmost,
    but that is a convention only and is not checked.
    """
    model_config = ConfigDict(frozen=True)

    p1: GeoPoint
    p2: GeoPoint
