from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ParsersConfig(BaseModel):
    enabled: list[str] = Field(default_factory=list)
    jobs: int = Field(default=1, gt=0)


class DocumentConfig(BaseModel):
    split_delimiter: str = Field(default="8<--", min_length=1)
    output_dir: str = "."
    allow_overwrite: bool = False
    context_key: str = Field(default="files", min_length=1)


class KvasirConfig(BaseModel):
    parsers: ParsersConfig = Field(default_factory=ParsersConfig)
    document: DocumentConfig = Field(default_factory=DocumentConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "warn"
    log_format: Literal["text", "json"] = "text"

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalise_level(cls, value: object) -> object:
        if isinstance(value, str):
            value = value.strip().lower()
            return "warn" if value == "warning" else value
        return value
