"""Raw order payload schemas as sent by the order service.

Decoding is lenient: a nested location with the wrong shape is dropped and
treated as a missing candidate instead of failing the whole order.
"""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator


class GeoJSONLocation(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    coordinates: Optional[List[Any]] = Field(default=None, description="GeoJSON order: [longitude, latitude].")


class LocatedEntity(BaseModel):
    """Restaurant, user or post author carrying an optional location."""

    model_config = ConfigDict(extra="ignore")

    location: Optional[GeoJSONLocation] = None

    @field_validator("location", mode="wrap")
    @classmethod
    def _drop_malformed(cls, value: Any, handler: Any) -> Optional[GeoJSONLocation]:
        try:
            return handler(value)
        except ValidationError:
            return None


class PostReference(BaseModel):
    model_config = ConfigDict(extra="ignore")

    author: Optional[LocatedEntity] = None

    @field_validator("author", mode="wrap")
    @classmethod
    def _drop_malformed(cls, value: Any, handler: Any) -> Optional[LocatedEntity]:
        try:
            return handler(value)
        except ValidationError:
            return None


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="ignore")

    post: Optional[PostReference] = None

    @field_validator("post", mode="wrap")
    @classmethod
    def _drop_malformed(cls, value: Any, handler: Any) -> Optional[PostReference]:
        try:
            return handler(value)
        except ValidationError:
            return None


class RawOrderPayload(BaseModel):
    """The location-bearing subset of an order record, decoded once at the boundary."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    order_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("_id", "id", "order_id"))
    status: Optional[str] = None

    pickup_latitude: Any = Field(default=None, alias="pickupLatitude")
    pickup_longitude: Any = Field(default=None, alias="pickupLongitude")
    delivery_latitude: Any = Field(default=None, alias="deliveryLatitude")
    delivery_longitude: Any = Field(default=None, alias="deliveryLongitude")

    pickup_location: Optional[GeoJSONLocation] = Field(default=None, alias="pickupLocation")
    delivery_location: Optional[GeoJSONLocation] = Field(default=None, alias="deliveryLocation")
    user_location: Optional[GeoJSONLocation] = Field(default=None, alias="userLocation")

    restaurant: Optional[LocatedEntity] = None
    user: Optional[LocatedEntity] = None
    items: Optional[List[Optional[OrderItem]]] = None

    @field_validator("order_id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @field_validator("status", mode="before")
    @classmethod
    def _normalise_status(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str) or not value.strip():
            return None
        return value.strip().lower()

    @field_validator("pickup_location", "delivery_location", "user_location", "restaurant", "user", mode="wrap")
    @classmethod
    def _drop_malformed(cls, value: Any, handler: Any) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return None

    @field_validator("items", mode="before")
    @classmethod
    def _decode_items(cls, value: Any) -> Optional[list]:
        if not isinstance(value, list):
            return None
        decoded: list[Optional[OrderItem]] = []
        for item in value:
            try:
                decoded.append(OrderItem.model_validate(item))
            except ValidationError:
                decoded.append(None)
        return decoded

    @property
    def first_item_author(self) -> Optional[LocatedEntity]:
        if not self.items or self.items[0] is None or self.items[0].post is None:
            return None
        return self.items[0].post.author


def decode_order(raw_order: Any) -> RawOrderPayload:
    """Accept either a raw mapping or an already-decoded payload."""

    if isinstance(raw_order, RawOrderPayload):
        return raw_order
    return RawOrderPayload.model_validate(raw_order)
