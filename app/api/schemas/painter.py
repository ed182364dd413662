"""API contract schemas for commit generation and pattern tools.

Request bodies accept camelCase keys (the browser editor's convention) as
well as snake_case; responses are serialized with camelCase keys.
"""

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from app.painter.constants import MAX_YEAR, MIN_YEAR, GradientDirection, PresetName
from app.painter.errors import InvalidRequestError, PainterError
from app.painter.line_graph import LineGraphConfig, LineGraphPreset
from app.painter.validators import validate_grid

# GitHub owner and repository names
NAME_PATTERN = r"^[A-Za-z0-9._-]+$"

REQUIRED_GENERATE_FIELDS = ("grid", "token", "username", "repo")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_grid(value: list[list[int]]) -> list[list[int]]:
    try:
        return validate_grid(value)
    except PainterError as e:
        raise ValueError(str(e)) from e


# ============================================================================
# Generation Schemas (/api/generate)
# ============================================================================


class GenerateRequest(CamelModel):
    """Request for POST /api/generate."""

    grid: list[list[StrictInt]] = Field(description="7x53 matrix of intensities (0-4)")
    token: str = Field(min_length=1, description="Personal access token with push rights")
    username: str = Field(min_length=1, pattern=NAME_PATTERN, description="Repository owner")
    repo: str = Field(min_length=1, pattern=NAME_PATTERN, description="Repository name")
    year: int | None = Field(default=None, ge=MIN_YEAR, le=MAX_YEAR, description="Target year (defaults to current)")

    @field_validator("grid")
    @classmethod
    def validate_grid_values(cls, value: list[list[int]]) -> list[list[int]]:
        return _check_grid(value)

    @field_validator("year", mode="before")
    @classmethod
    def empty_year_is_current(cls, value: object) -> object:
        """Treat falsy years (0, empty string) as "current year"."""
        if not value:
            return None
        return value


def describe_validation_error(error: ValidationError) -> str:
    """Collapse a pydantic error into one user-facing line."""
    missing = [str(e["loc"][0]) for e in error.errors() if e["type"] == "missing" and e["loc"]]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    message = first["msg"].removeprefix("Value error, ")
    return f"{location}: {message}" if location else message


def parse_generate_request(payload: object) -> GenerateRequest:
    """Validate a decoded /api/generate body.

    Absent, null and empty required fields all count as missing.

    Raises:
        InvalidRequestError: With a single user-facing message
    """
    if not isinstance(payload, dict):
        raise InvalidRequestError("Request body must be a JSON object")
    missing = [field for field in REQUIRED_GENERATE_FIELDS if not payload.get(field)]
    if missing:
        raise InvalidRequestError(f"Missing required fields: {', '.join(missing)}")
    try:
        return GenerateRequest.model_validate(payload)
    except ValidationError as e:
        raise InvalidRequestError(describe_validation_error(e)) from e


# ============================================================================
# Pattern Schemas (/api/patterns)
# ============================================================================


class PresetInfo(CamelModel):
    id: str
    name: str
    description: str


class PresetRequest(CamelModel):
    name: PresetName
    seed: int | None = Field(default=None, description="Seed for random presets")


class GradientRequest(CamelModel):
    direction: GradientDirection = "LEFT_TO_RIGHT"
    max_level: float = Field(default=4, ge=0, le=4)


class TextRequest(CamelModel):
    text: str = Field(max_length=64)
    level: int = Field(default=4, ge=1, le=4)


class LineGraphRequest(LineGraphConfig):
    seed: int | None = Field(default=0, description="Seed for jitter; null draws a fresh one")


class EstimateRequest(CamelModel):
    grid: list[list[StrictInt]]
    intensity: int = Field(default=1, ge=1)

    @field_validator("grid")
    @classmethod
    def validate_grid_values(cls, value: list[list[int]]) -> list[list[int]]:
        return _check_grid(value)


class ExportRequest(CamelModel):
    grid: list[list[StrictInt]]
    preset: LineGraphPreset | None = None

    @field_validator("grid")
    @classmethod
    def validate_grid_values(cls, value: list[list[int]]) -> list[list[int]]:
        return _check_grid(value)


class GridResponse(CamelModel):
    grid: list[list[int]]
    estimated_commits: int


class EstimateResponse(CamelModel):
    estimated_commits: int
