# app/board/transfer.py
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.board.errors import BoardValidationError
from app.ticket.colors import HEX_COLOR


class StepEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = ""
    order_index: int = 0

    @field_validator("name", mode="before")
    @classmethod
    def blank_name(cls, value):
        return value or ""


class SettingsDocument(BaseModel):
    """Exported board settings: the step sequence and the custom palette."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    steps: list[StepEntry]
    custom_colors: list[str] = Field(default_factory=list, alias="customColors")
    sequential_numbering: bool | None = Field(default=None, alias="sequentialNumbering")
    export_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), alias="exportDate")

    @field_validator("custom_colors")
    @classmethod
    def check_colors(cls, value: list[str]) -> list[str]:
        bad = [color for color in value if not HEX_COLOR.match(color)]
        if bad:
            raise ValueError(f"invalid custom colors: {', '.join(bad)}")
        return [color.lower() for color in value]


def dump_settings(document: SettingsDocument) -> str:
    return document.model_dump_json(by_alias=True, indent=2)


def load_settings(text: str | bytes) -> SettingsDocument:
    try:
        return SettingsDocument.model_validate_json(text)
    except ValidationError as exc:
        raise BoardValidationError("Invalid settings file.") from exc


def settings_filename(document: SettingsDocument) -> str:
    return f"ticket-manager-settings-{document.export_date.date().isoformat()}.json"
