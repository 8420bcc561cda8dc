"""Map model identifiers onto energy tiers."""

from collections.abc import Callable, Iterable

from ecostat.logger import logger
from ecostat.models import ModelTier

logger = logger.getChild("classifier")

MODEL_TIERS: dict[str, ModelTier] = {
    # Anthropic
    "claude-haiku-4-5": ModelTier.SMALL,
    "claude-sonnet-4-5": ModelTier.MEDIUM,
    "claude-sonnet-4": ModelTier.MEDIUM,
    "claude-opus-4": ModelTier.LARGE,
    # OpenAI
    "gpt-4o-mini": ModelTier.SMALL,
    "gpt-4.1-mini": ModelTier.SMALL,
    "gpt-4.1-nano": ModelTier.SMALL,
    "gpt-4o": ModelTier.MEDIUM,
    "gpt-4.1": ModelTier.MEDIUM,
    "o3-mini": ModelTier.MEDIUM,
    "o3": ModelTier.LARGE,
    "o4-mini": ModelTier.MEDIUM,
    # Google
    "gemini-2.0-flash": ModelTier.SMALL,
    "gemini-2.5-flash": ModelTier.SMALL,
    "gemini-2.5-pro": ModelTier.MEDIUM,
}

DEFAULT_TIER = ModelTier.MEDIUM

TierRule = tuple[str, Callable[[str], bool], ModelTier]

# Evaluated in order against the lower-cased identifier; first match wins.
TIER_RULES: tuple[TierRule, ...] = (
    ("haiku", lambda model: "haiku" in model, ModelTier.SMALL),
    ("mini", lambda model: "mini" in model, ModelTier.SMALL),
    ("nano", lambda model: "nano" in model, ModelTier.SMALL),
    ("flash", lambda model: "flash" in model, ModelTier.SMALL),
    ("opus", lambda model: "opus" in model, ModelTier.LARGE),
    ("o3", lambda model: "o3" in model and "mini" not in model, ModelTier.LARGE),
)


def classify_model(model_id: str) -> ModelTier:
    """Return the energy tier for a model identifier.

    Exact matches in :data:`MODEL_TIERS` win, then :data:`TIER_RULES` are
    tried in order. Unknown identifiers fall back to :data:`DEFAULT_TIER`.
    """
    tier = MODEL_TIERS.get(model_id)
    if tier is not None:
        return tier
    lowered = model_id.lower()
    for name, matches, rule_tier in TIER_RULES:
        if matches(lowered):
            logger.debug(f"model {model_id!r} matched rule {name!r}: {rule_tier.value}")
            return rule_tier
    logger.debug(f"model {model_id!r} unknown, using {DEFAULT_TIER.value}")
    return DEFAULT_TIER


def dominant_tier(model_ids: Iterable[str]) -> ModelTier:
    """Return the highest-impact tier among ``model_ids``.

    Sessions do not track tokens per model, so the whole session is billed at
    the rate of its largest model. An empty collection yields ``small``.
    """
    dominant = ModelTier.SMALL
    for model_id in model_ids:
        tier = classify_model(model_id)
        if tier.rank > dominant.rank:
            dominant = tier
        if dominant is ModelTier.LARGE:
            break
    return dominant
