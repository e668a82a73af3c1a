"""Property schemas (read-only catalog data)."""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Property(BaseModel):
    """Bookable details of a property."""

    model_config = ConfigDict(populate_by_name=True)

    property_id: int = Field(validation_alias=AliasChoices("propertyId", "property_id"))
    name: str | None = Field(default=None, validation_alias=AliasChoices("propertyName", "name"))
    nightly_rate: int = Field(ge=0, validation_alias=AliasChoices("pricePerDay", "nightly_rate"))
    max_guests: int | None = Field(
        default=None, validation_alias=AliasChoices("maxNoOfGuests", "max_guests")
    )
    city: str | None = None
    state: str | None = None
    country: str | None = None
    host_id: int | None = Field(default=None, validation_alias=AliasChoices("hostId", "host_id"))
    status: str | None = Field(default=None, validation_alias=AliasChoices("propertyStatus", "status"))

    @property
    def location(self) -> str:
        return ", ".join(part for part in (self.city, self.state) if part)
