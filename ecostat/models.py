"""Data models for ecostat session accounting and reports."""

from datetime import datetime
from enum import Enum

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeFloat,
    NonNegativeInt,
)


class ModelTier(str, Enum):
    """Coarse size class of a language model."""

    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def rank(self) -> int:
        """Return the impact rank of the tier; larger means more energy."""
        return _TIER_RANKS[self]


_TIER_RANKS = {ModelTier.SMALL: 0, ModelTier.MEDIUM: 1, ModelTier.LARGE: 2}


class UsageSnapshot(BaseModel):
    """Cumulative usage reported for one message at one point in time."""

    model_config = ConfigDict(frozen=True)

    input: NonNegativeInt = 0
    output: NonNegativeInt = 0
    reasoning: NonNegativeInt = 0
    cache_read: NonNegativeInt = 0
    cache_write: NonNegativeInt = 0
    cost: NonNegativeFloat = 0.0


ZERO_SNAPSHOT = UsageSnapshot()


class SessionStats(BaseModel):
    """Running totals for a single host session.

    Token and cost totals are plain ``int``/``float`` because a non-monotonic
    snapshot can push a delta below zero when clamping is disabled.
    """

    session_id: str
    input_tokens: int = 0
    output_tokens: int = 0
    reasoning_tokens: int = 0
    cache_read_tokens: int = 0
    cache_write_tokens: int = 0
    cost: float = 0.0
    messages: NonNegativeInt = 0
    models: set[str] = Field(default_factory=set)
    providers: set[str] = Field(default_factory=set)
    first_seen: datetime
    last_updated: datetime

    def add_usage(
        self,
        *,
        input: int,
        output: int,
        reasoning: int,
        cache_read: int,
        cache_write: int,
        cost: float,
    ) -> None:
        """Accumulate one usage delta into the running totals."""
        self.input_tokens += input
        self.output_tokens += output
        self.reasoning_tokens += reasoning
        self.cache_read_tokens += cache_read
        self.cache_write_tokens += cache_write
        self.cost += cost

    @property
    def total_tokens(self) -> int:
        """Return tokens that count towards energy: input, output and reasoning."""
        return self.input_tokens + self.output_tokens + self.reasoning_tokens


class EcoGrade(BaseModel):
    """Letter grade describing CO2 efficiency per message."""

    model_config = ConfigDict(frozen=True)

    grade: str
    label: str
    level: int = Field(ge=1, le=10)
    tip: str


class CarbonEstimate(BaseModel):
    """Energy and CO2 estimate for a number of tokens."""

    model_config = ConfigDict(frozen=True)

    total_tokens: NonNegativeInt
    tier: ModelTier
    grid_intensity: float
    energy_kwh: float
    co2_grams: float

    @property
    def energy_wh(self) -> float:
        return self.energy_kwh * 1000


class Equivalents(BaseModel):
    """Everyday activities emitting roughly the same amount of CO2."""

    model_config = ConfigDict(frozen=True)

    google_searches: float
    phone_charges: float
    video_streaming_seconds: float
    led_bulb_minutes: float
    km_driven: float


class TokenBreakdown(BaseModel):
    """Per-type token totals of a session."""

    input: int
    output: int
    reasoning: int
    cache_read: int
    cache_write: int


class EcoReport(BaseModel):
    """Everything needed to render a session's eco report."""

    session_id: str
    grade: EcoGrade
    estimate: CarbonEstimate
    equivalents: Equivalents
    tokens: TokenBreakdown
    messages: NonNegativeInt
    cost: float
    co2_per_message: float
    duration_minutes: float
    started_at: datetime
    models: list[str] = Field(default_factory=list)
    providers: list[str] = Field(default_factory=list)
