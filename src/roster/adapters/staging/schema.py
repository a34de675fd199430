"""Pydantic models describing staged user rows supplied by tenants."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from roster.domain.model.user import EMAIL_PATTERN


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class StagingBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)


class ImportedUserRow(StagingBaseModel):
    email: str
    name: str = Field(min_length=1)
    first_name: str | None = Field(default=None, alias="firstName")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        normalized = value.lower()
        if EMAIL_PATTERN.match(normalized) is None:
            raise ValueError(f"invalid email address '{value}'")
        return normalized

    _normalize_first_name = field_validator("first_name", mode="before")(_blank_to_none)
