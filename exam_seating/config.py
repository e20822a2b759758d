from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic.aliases import AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


PROJECT_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=PROJECT_DIR / ".env", env_file_encoding="utf-8", extra="ignore")

    database_url: str = Field(
        default="sqlite:///./seat_allocator.db",
        validation_alias=AliasChoices("database_url", "DATABASE_URL"),
    )

    environment: str = Field(default="development", validation_alias=AliasChoices("environment", "ENVIRONMENT"))

    api_host: str = Field(default="127.0.0.1", validation_alias=AliasChoices("api_host", "API_HOST"))
    api_port: int = Field(default=8000, ge=1, le=65535, validation_alias=AliasChoices("api_port", "API_PORT"))

    export_dir: Path = Field(default=Path("exports"), validation_alias=AliasChoices("export_dir", "EXPORT_DIR"))

    # Branch that alternates with every other branch inside a room.
    reference_branch: str = Field(
        default="CSE",
        validation_alias=AliasChoices("reference_branch", "REFERENCE_BRANCH"),
    )

    # How far ahead a pool is searched for a student whose branch differs from the left neighbour.
    lookahead_window: int = Field(
        default=5,
        ge=1,
        validation_alias=AliasChoices("lookahead_window", "LOOKAHEAD_WINDOW"),
    )

    # capacity -> (rows, cols) for the standard hall types
    known_room_shapes: dict[int, tuple[int, int]] = Field(
        default_factory=lambda: {60: (6, 10), 45: (5, 9)},
        validation_alias=AliasChoices("known_room_shapes", "KNOWN_ROOM_SHAPES"),
    )

    @field_validator("reference_branch")
    @classmethod
    def _normalize_reference_branch(cls, v: str) -> str:
        v = (v or "").strip().upper()
        if not v:
            raise ValueError("REFERENCE_BRANCH must not be empty")
        return v

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, v: str) -> str:
        return (v or "development").strip().lower()

    @field_validator("known_room_shapes")
    @classmethod
    def _check_known_room_shapes(cls, v: dict[int, tuple[int, int]]) -> dict[int, tuple[int, int]]:
        for capacity, (rows, cols) in v.items():
            if rows * cols != capacity:
                raise ValueError(f"Room shape {rows}x{cols} does not hold {capacity} seats")
        return v


settings = Settings()
