"""Base Pydantic schemas with the API's camelCase field naming."""

from typing import ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base schema for API payloads.

    Attributes are snake_case (matching the database columns) and are
    exposed as camelCase in JSON. Either spelling is accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )


class UpdateModel(CamelModel):
    """
    Base schema for partial updates.

    Every mutable field must be declared on the subclass; unknown fields are
    rejected instead of being written through to the database. Fields named
    in ``non_nullable_fields`` may be omitted but not sent as null.
    """

    model_config = ConfigDict(extra="forbid")

    non_nullable_fields: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_nulls(self):
        """Refuse an explicit null for a column that cannot hold one."""
        for field in self.non_nullable_fields:
            if field in self.model_fields_set and getattr(self, field) is None:
                raise ValueError(f"{to_camel(field)} may not be null")
        return self

    def changes(self) -> dict:
        """Return only the fields the client actually sent."""
        return self.model_dump(exclude_unset=True)
