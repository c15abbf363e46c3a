from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RulesModel(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RateLimitWindow(RulesModel):
    window_seconds: int = Field(900, gt=0)
    max_requests: int = Field(100, ge=0)


class RateLimitRules(RulesModel):
    enabled: bool = True
    api: RateLimitWindow = Field(default_factory=RateLimitWindow)


class SecurityRules(RulesModel):
    allowed_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    check_referer: bool = True


class DuplicatePolicy(str, Enum):
    UPSERT = "upsert"
    REJECT = "reject"


class NewsletterRules(RulesModel):
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.UPSERT
    allowed_email_domains: list[str] = Field(default_factory=lambda: ["nyu.edu"])
    signup_tag: str = "Website Signup"


class RangeRule(RulesModel):
    default: int
    min: int = 1
    max: int

    @model_validator(mode="after")
    def check_bounds(self) -> "RangeRule":
        if not self.min <= self.default <= self.max:
            raise ValueError(f"default {self.default} outside [{self.min}, {self.max}]")
        return self


class PaginationRules(RulesModel):
    events_limit: RangeRule = Field(default_factory=lambda: RangeRule(default=10, max=100))
    upcoming_limit: RangeRule = Field(default_factory=lambda: RangeRule(default=5, max=50))


class OpsRules(RulesModel):
    required_env: list[str] = Field(default_factory=list)
    auto_migrate: bool = True


class Rules(RulesModel):
    rate_limit: RateLimitRules = Field(default_factory=RateLimitRules)
    security: SecurityRules = Field(default_factory=SecurityRules)
    newsletter: NewsletterRules = Field(default_factory=NewsletterRules)
    pagination: PaginationRules = Field(default_factory=PaginationRules)
    ops: OpsRules = Field(default_factory=OpsRules)
