"""Base model for store snapshots and fetched records.

Every rxstores model inherits from :class:`StoreModel` which provides:

* ``frozen=True`` so snapshots handed to consumers can never be mutated;
  stores produce the next snapshot with ``model_copy(update=...)``.
* ``alias_generator=to_camel`` so camelCase keys from JSON records
  (``userId``) map automatically to snake_case fields.

Values are taken as given; missing keys fall back to the field defaults.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class StoreModel(BaseModel):
    """Base for snapshots, actions and records."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )
