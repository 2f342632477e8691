"""Boundary validation for inbound outline payloads.

The trigger API hands over loosely-typed JSON. parse_outline() turns it into
an ArticleOutline or raises OutlineValidationError listing every problem;
nothing past this point sees raw payloads.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from src.common.exceptions import OutlineValidationError
from src.common.models import DEFAULT_CATEGORY, Category

from .models import ArticleOutline

DEFAULT_TARGET_LENGTH = 1500


class OutlinePayload(BaseModel):
    """Schema of the inbound generation request body."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    topic: str
    keywords: list[str] = Field(min_length=1)
    target_length: int = Field(default=DEFAULT_TARGET_LENGTH, alias="targetLength", gt=0)
    sections: list[str] = Field(default_factory=list)
    category: Category = DEFAULT_CATEGORY

    @field_validator("topic")
    @classmethod
    def _topic_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("topic must be a non-empty string")
        return value.strip()

    @field_validator("keywords")
    @classmethod
    def _keywords_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [k.strip() for k in value if k.strip()]
        if not cleaned:
            raise ValueError("keywords must contain at least one non-empty string")
        return cleaned

    @field_validator("category", mode="before")
    @classmethod
    def _unknown_category_to_default(cls, value: Any) -> Any:
        valid = {c.value for c in Category}
        if isinstance(value, Category) or (isinstance(value, str) and value in valid):
            return value
        return DEFAULT_CATEGORY

    def to_outline(self) -> ArticleOutline:
        return ArticleOutline(
            topic=self.topic,
            keywords=tuple(self.keywords),
            target_length=self.target_length,
            sections=tuple(self.sections),
            category=self.category,
        )


def parse_outline(payload: Any) -> ArticleOutline:
    """Validate a request body and build the outline.

    Args:
        payload: Decoded JSON body (expected to be a dict)

    Returns:
        ArticleOutline ready for generation

    Raises:
        OutlineValidationError: With one entry per invalid field
    """
    if not isinstance(payload, dict):
        raise OutlineValidationError(
            [{"field": "body", "message": "Request body must be a JSON object"}]
        )
    try:
        parsed = OutlinePayload.model_validate(payload)
    except ValidationError as exc:
        errors = [
            {
                "field": ".".join(str(part) for part in err["loc"]) or "body",
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        raise OutlineValidationError(errors) from exc
    return parsed.to_outline()
