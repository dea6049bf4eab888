# ride_match/app/schemas.py
"""Input payloads of the operations surface. Keys are the camelCase names HTTP clients send."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


class RegisterUserIn(_Payload):
    user_id: int = Field(alias="userId")
    name: str = Field(min_length=1)
    role: Literal["driver", "passenger"]


class SetRatingIn(_Payload):
    user_id: int = Field(alias="userId")
    rating: int = Field(ge=0)


class CreateOfferIn(_Payload):
    offer_id: int = Field(alias="offerId")
    driver_id: int = Field(alias="driverId")
    start: str = Field(min_length=1)
    end: str = Field(min_length=1)
    depart_time: int = Field(alias="departTime")
    capacity: int


class CreateRequestIn(_Payload):
    request_id: int = Field(alias="requestId")
    passenger_id: int = Field(alias="passengerId")
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)
    earliest: int
    latest: int


class ReachableIn(_Payload):
    offer_id: int = Field(alias="offerId")
    cost_bound: int = Field(alias="costBound")


class RouteIn(_Payload):
    from_: str = Field(alias="from", min_length=1)
    to: str = Field(min_length=1)
