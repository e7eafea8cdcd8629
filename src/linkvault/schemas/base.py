"""Shared pydantic config for wire models.

Python attributes stay snake_case; JSON uses camelCase (``ownerId``,
``createdAt``). Either spelling is accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
