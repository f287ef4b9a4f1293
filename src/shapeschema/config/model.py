from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Output(BaseModel):
    model_config = ConfigDict(extra="forbid")

    path: str | None = None
    indent: int = 2
    sort_keys: bool = False


class Config(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str = "v1"
    root: str | None = None
    shapes: dict[str, str] = Field(default_factory=dict)
    definitions: dict[str, str] = Field(default_factory=dict)
    definitions_key: str = "definitions"
    base_path: str = "#"
    dialect: str | None = None
    unused_definitions: bool = False
    const_as_enum: bool = False
    check_schema: bool = True
    output: Output = Field(default_factory=Output)

    @field_validator("shapes", "definitions")
    @classmethod
    def _validate_names(cls, value: dict[str, Any]) -> dict[str, Any]:
        for name in value:
            if not name:
                raise ValueError("Shape names must be non-empty strings.")
        return value

    @model_validator(mode="after")
    def _validate_config(self) -> "Config":
        if self.version != "v1":
            raise ValueError("Only version v1 is supported.")
        if self.root and self.shapes:
            raise ValueError("Use either 'root' or 'shapes', not both.")
        if not self.root and not self.shapes:
            raise ValueError("One of 'root' or 'shapes' is required.")
        duplicates = sorted(set(self.shapes) & set(self.definitions))
        if duplicates:
            dup_list = ", ".join(duplicates)
            raise ValueError(f"Names listed in both shapes and definitions: {dup_list}")
        return self
