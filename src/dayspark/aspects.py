"""Aspect table and sampled aspect-crossing detection between two bodies."""

from collections.abc import Sequence

import numpy as np

from dayspark.bodies import ecliptic_position
from dayspark.models import AspectCategory, AspectDefinition, Body, FeatureFlags

ASPECTS: tuple[AspectDefinition, ...] = (
    AspectDefinition(0.0, "☌", "Conjunction", AspectCategory.BASIC),
    AspectDefinition(180.0, "☍", "Opposition", AspectCategory.BASIC),
    AspectDefinition(60.0, "⚹", "Sextile", AspectCategory.ASTROLOGY),
    AspectDefinition(90.0, "□", "Square", AspectCategory.ASTROLOGY),
    AspectDefinition(120.0, "△", "Trine", AspectCategory.ASTROLOGY),
    AspectDefinition(30.0, "⚺", "Semi-sextile", AspectCategory.DEEP),
    AspectDefinition(45.0, "∠", "Semi-square", AspectCategory.DEEP),
    AspectDefinition(72.0, "Q", "Quintile", AspectCategory.DEEP),
    AspectDefinition(135.0, "⚼", "Sesquiquadrate", AspectCategory.DEEP),
    AspectDefinition(144.0, "bQ", "Biquintile", AspectCategory.DEEP),
)

# A real crossing moves the offset by a few degrees per sample; a wrap through
# +/-180 jumps it by ~360.
_MAX_SAMPLE_JUMP_DEG = 90.0


def enabled_aspects(flags: FeatureFlags) -> tuple[AspectDefinition, ...]:
    categories = {AspectCategory.BASIC}
    if flags.astrology_aspects:
        categories.add(AspectCategory.ASTROLOGY)
    if flags.deep_astrology:
        categories.add(AspectCategory.DEEP)
    return tuple(a for a in ASPECTS if a.category in categories)


def signed_targets(aspect: AspectDefinition) -> tuple[float, ...]:
    """Signed separations at which ``aspect`` is exact."""
    if aspect.angle in (0.0, 180.0):
        return (aspect.angle,)
    return (aspect.angle, -aspect.angle)


def wrap180(angles: np.ndarray) -> np.ndarray:
    """Normalise angles in degrees into [-180, 180)."""
    return (angles + 180.0) % 360.0 - 180.0


def separation_series(body_a: Body, body_b: Body, samples: np.ndarray) -> np.ndarray:
    """Signed longitude difference A - B in [-180, 180) at each sample day."""
    lon_a = np.array([ecliptic_position(body_a, d).longitude for d in samples])
    lon_b = np.array([ecliptic_position(body_b, d).longitude for d in samples])
    return wrap180(lon_a - lon_b)


def crossing_fractions(offsets: np.ndarray) -> list[tuple[int, float]]:
    """Sign changes of a sampled offset series.

    Returns:
        ``(interval index, fraction of the interval)`` for each zero crossing,
        with the fraction linearly interpolated. An offset that lands exactly on
        zero counts once, in the interval that ends on it.
    """
    before, after = offsets[:-1], offsets[1:]
    steady = np.abs(after - before) <= _MAX_SAMPLE_JUMP_DEG
    crosses = ((before < 0) & (after >= 0)) | ((before > 0) & (after <= 0))
    hits = np.flatnonzero(steady & crosses)
    fractions = before[hits] / (before[hits] - after[hits])
    return [(int(i), float(f)) for i, f in zip(hits, fractions)]


def find_aspect_crossings(
    body_a: Body,
    body_b: Body,
    samples: Sequence[float],
    aspects: Sequence[AspectDefinition],
) -> list[tuple[float, AspectDefinition]]:
    """Moments inside the sampled span at which A and B reach an aspect.

    Assumes separation changes linearly between consecutive samples. Swapping A
    and B negates every offset, so both orders find the same crossings.

    Args:
        body_a: First body.
        body_b: Second body.
        samples: Increasing epoch days spanning the search window.
        aspects: Aspect definitions to test.

    Returns:
        List of ``(epoch day, aspect)`` pairs in sample order.
    """
    grid = np.asarray(samples, dtype=float)
    separation = separation_series(body_a, body_b, grid)
    found: list[tuple[float, AspectDefinition]] = []
    for aspect in aspects:
        for target in signed_targets(aspect):
            offsets = wrap180(separation - target)
            for i, frac in crossing_fractions(offsets):
                found.append((grid[i] + frac * (grid[i + 1] - grid[i]), aspect))
    found.sort(key=lambda hit: hit[0])
    return found
