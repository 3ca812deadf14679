"""
Shared schema building blocks.

JSON payloads use camelCase field names while Python code and table columns
use snake_case; the alias generator bridges the two.
"""
import re
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

PARTNER_ID_PATTERN = r"^[0-9]{4}$"

_partner_id_re = re.compile(PARTNER_ID_PATTERN)


def check_partner_id(value: str) -> str:
    if not _partner_id_re.match(value):
        raise PydanticCustomError("partner_id", "Partner ID must be exactly 4 digits")
    return value


# Required text: surrounding whitespace is stripped, empty values are rejected
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

PartnerId = Annotated[str, StringConstraints(strip_whitespace=True), AfterValidator(check_partner_id)]


class PortalModel(BaseModel):
    """Base for every payload schema: camelCase on the wire, no unknown keys."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )
