from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Range of the integer columns (PostgreSQL int4)
INT_MIN = -2**31
INT_MAX = 2**31 - 1


class CamelModel(BaseModel):
    """Base schema: snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    """Base for request bodies and query filters; unknown fields are rejected."""
    model_config = ConfigDict(extra="forbid")
