# =============================================================================
# core/models/wine.py - Wine and Vivino Schemas
# =============================================================================
# These models describe the two sides of an enrichment:
# - Wine: a row of the wines table as the sweep sees it
# - VivinoWineData: what the Vivino fetch-by-id call returns for one wine
# =============================================================================

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from lib.utils import is_blank


# Fields the sweep is allowed to fill in, in patch order
ENRICHABLE_FIELDS: tuple[str, ...] = ("rating", "region", "grapes")


def _coerce_grapes(value: Any) -> list[str] | None:
    """Accept a list, a single grape name, or nothing."""
    if value is None:
        return None
    if isinstance(value, str):
        return [value] if value.strip() else []
    return [str(grape) for grape in value if grape]


class Wine(BaseModel):
    """
    A wine row selected as an enrichment candidate.

    Only the columns the sweep reads are modelled; anything else the
    query returns is ignored.

    Example:
        {
            "id": "3f1c...",
            "user_id": "9a2b...",
            "producer": "Ridge",
            "wine_name": "Monte Bello",
            "vintage": 2016,
            "vivino_url": "https://www.vivino.com/w/1234567",
            "rating": null,
            "region": "Santa Cruz Mountains",
            "grapes": null
        }
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Wine UUID")
    user_id: str | None = Field(default=None, description="Owner of the wine")
    producer: str | None = None
    wine_name: str | None = None
    vintage: int | None = None
    vivino_url: str | None = None
    rating: float | None = None
    region: str | None = None
    grapes: list[str] | None = None

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def _stringify_ids(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("grapes", mode="before")
    @classmethod
    def _normalize_grapes(cls, value: Any) -> list[str] | None:
        return _coerce_grapes(value)

    def is_missing(self, field: str) -> bool:
        """True if the given enrichable field is still empty."""
        return is_blank(getattr(self, field))

    @property
    def label(self) -> str:
        """Human-readable name for log lines."""
        parts = [self.producer, self.wine_name, str(self.vintage) if self.vintage else None]
        return " ".join(part for part in parts if part) or self.id


class VivinoWineData(BaseModel):
    """
    Cleaned Vivino data for a single wine.

    Mirrors the payload of the fetch-vivino-data function. A rating of 0
    is how that function says "no rating", so it counts as missing.
    """

    model_config = ConfigDict(extra="ignore")

    wine_id: str | None = None
    name: str = ""
    winery: str = ""
    rating: float | None = None
    rating_count: int = 0
    image_url: str | None = None
    vintage: int | None = None
    region: str | None = None
    country: str | None = None
    grapes: list[str] | None = None
    wine_type: str | None = None
    price: float | None = None
    alcohol_content: float | None = None

    @field_validator("wine_id", mode="before")
    @classmethod
    def _stringify_wine_id(cls, value: Any) -> Any:
        return str(value) if value is not None else value

    @field_validator("grapes", mode="before")
    @classmethod
    def _normalize_grapes(cls, value: Any) -> list[str] | None:
        return _coerce_grapes(value)

    @field_validator(
        "name", "winery", "rating_count", "image_url", "vintage",
        "country", "wine_type", "price", "alcohol_content",
        mode="wrap",
    )
    @classmethod
    def _default_when_unreadable(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        # Only rating/region/grapes are written back; anything else that
        # fails validation falls back to its default.
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].default

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "VivinoWineData":
        """
        Build from a fetch-vivino-data payload.

        The function reports a single `grape`; a `grapes` list wins when
        both are present.
        """
        data = dict(payload)
        if not data.get("grapes") and data.get("grape"):
            data["grapes"] = data["grape"]
        return cls.model_validate(data)

    def value_for(self, field: str) -> Any:
        """Value of an enrichable field, or None when Vivino has nothing."""
        value = getattr(self, field)
        if field == "rating" and not value:
            return None
        return None if is_blank(value) else value

    def has_enrichable_data(self) -> bool:
        """True if Vivino returned at least one of rating/region/grapes."""
        return any(self.value_for(field) is not None for field in ENRICHABLE_FIELDS)
