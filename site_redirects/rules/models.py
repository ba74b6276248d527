from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from site_redirects.components.redirects import (
    DEFAULT_PERMANENT_CODE,
    as_origin,
    as_pathname,
    as_redirect_code,
    template_rule,
)


class NormalizeRules(BaseModel):
    lowercase: bool = False
    trailing_slash: Literal["preserve", "strip", "ensure"] = "preserve"

    model_config = ConfigDict(extra="forbid")


class ExactRule(BaseModel):
    source: str = Field(alias="from")
    to: str

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    @field_validator("source", "to")
    @classmethod
    def check_pathname(cls, v: str) -> str:
        return as_pathname(v)


class PatternRuleSpec(BaseModel):
    pattern: str
    to: str

    model_config = ConfigDict(extra="forbid")

    @model_validator(mode="after")
    def check_templates(self) -> "PatternRuleSpec":
        # Compile once here so a bad template fails at load time
        template_rule(self.pattern, self.to)
        return self


class RedirectRules(BaseModel):
    new_origin: str
    status_code: int = int(DEFAULT_PERMANENT_CODE)
    normalize: NormalizeRules = Field(default_factory=NormalizeRules)
    exact: list[ExactRule] = Field(default_factory=list)
    gone: list[str] = Field(default_factory=list)
    patterns: list[PatternRuleSpec] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @field_validator("new_origin")
    @classmethod
    def check_origin(cls, v: str) -> str:
        return as_origin(v)

    @field_validator("status_code")
    @classmethod
    def check_status_code(cls, v: int) -> int:
        return int(as_redirect_code(v))

    @field_validator("gone")
    @classmethod
    def check_gone(cls, v: list[str]) -> list[str]:
        return [as_pathname(p) for p in v]
