# ride_match/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events
@dataclass
class BizEvent:
    run_id: str
    seq: int  # emission order within the run
    name: str  # stable event name


@dataclass
class OfferPostedBiz(BizEvent):
    offer_id: int
    driver_id: int
    start: str
    end: str
    depart_time: int
    capacity: int


@dataclass
class RideRequestedBiz(BizEvent):
    request_id: int
    passenger_id: int
    origin: str
    dest: str
    earliest: int
    latest: int


@dataclass
class RideMatchedBiz(BizEvent):
    request_id: int
    passenger_id: int
    offer_id: int
    driver_id: int
    depart_time: int
    seats_left: int
    offers_scanned: int


@dataclass
class RequestRequeuedBiz(BizEvent):
    request_id: int
    passenger_id: int
    earliest: int
    offers_scanned: int
