from typing import Annotated, Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel


PHONE_PATTERN = r"^[+]?[1-9]\d{0,15}$"

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
PhoneStr = Annotated[str, StringConstraints(strip_whitespace=True, pattern=PHONE_PATTERN)]


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self, **kwargs) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", **kwargs)


def success(data: Optional[Dict[str, Any]] = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Standard success envelope"""
    body: Dict[str, Any] = {"status": "success"}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    return body
