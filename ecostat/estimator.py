"""Energy and CO2 estimation from token counts.

Per-token energy figures follow Luccioni et al., "Power Hungry Processing"
(2023), assuming a PUE of about 1.1 for hyperscale data centres. They are
rough estimates; real values depend on hardware, location and cooling.
"""

from ecostat.models import CarbonEstimate, Equivalents, ModelTier

# kWh per token, input and output averaged.
ENERGY_PER_TOKEN_KWH: dict[ModelTier, float] = {
    ModelTier.SMALL: 0.0000003,  # 0.3 Wh / 1k tokens
    ModelTier.MEDIUM: 0.000001,  # 1.0 Wh / 1k tokens
    ModelTier.LARGE: 0.000003,  # 3.0 Wh / 1k tokens
}

# Grams of CO2 per unit of each everyday activity.
GOOGLE_SEARCH_G = 0.2
PHONE_CHARGE_G = 8.22
VIDEO_STREAM_SECOND_G = 0.01  # ~36 g/h
LED_BULB_MINUTE_G = 0.0667  # 10 W LED at 400 g/kWh
CAR_KM_G = 121.0  # EU average car


def estimate_carbon(
    total_tokens: int, tier: ModelTier, grid_intensity: float
) -> CarbonEstimate:
    """Estimate energy (kWh) and CO2 (g) for ``total_tokens`` at ``tier``."""
    energy_kwh = total_tokens * ENERGY_PER_TOKEN_KWH[tier]
    return CarbonEstimate(
        total_tokens=total_tokens,
        tier=tier,
        grid_intensity=grid_intensity,
        energy_kwh=energy_kwh,
        co2_grams=energy_kwh * grid_intensity,
    )


def compute_equivalents(co2_grams: float) -> Equivalents:
    """Express ``co2_grams`` as amounts of everyday activities."""
    return Equivalents(
        google_searches=co2_grams / GOOGLE_SEARCH_G,
        phone_charges=co2_grams / PHONE_CHARGE_G,
        video_streaming_seconds=co2_grams / VIDEO_STREAM_SECOND_G,
        led_bulb_minutes=co2_grams / LED_BULB_MINUTE_G,
        km_driven=co2_grams / CAR_KM_G,
    )
