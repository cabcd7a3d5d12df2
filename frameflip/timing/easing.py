"""Cubic-bezier timing curves for eased playback."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any

import numpy as np

logger = logging.getLogger(__name__)

PRESET_TIMING_FUNCTIONS: dict[str, tuple[float, float, float, float]] = {
    "linear": (0.0, 0.0, 1.0, 1.0),
    "ease": (0.25, 0.1, 0.25, 1.0),
    "ease-in": (0.42, 0.0, 1.0, 1.0),
    "ease-out": (0.0, 0.0, 0.58, 1.0),
    "ease-in-out": (0.42, 0.0, 0.58, 1.0),
}

_NEWTON_ITERATIONS = 4
_NEWTON_MIN_SLOPE = 0.001
_SUBDIVISION_PRECISION = 0.0000001
_SUBDIVISION_MAX_ITERATIONS = 10
_SPLINE_TABLE_SIZE = 11
_SAMPLE_STEP = 1.0 / (_SPLINE_TABLE_SIZE - 1)


def _coefficients(a1: float, a2: float) -> tuple[float, float, float]:
    return 1.0 - 3.0 * a2 + 3.0 * a1, 3.0 * a2 - 6.0 * a1, 3.0 * a1


def _bezier(t, a1: float, a2: float):
    a, b, c = _coefficients(a1, a2)
    return ((a * t + b) * t + c) * t


def _slope(t: float, a1: float, a2: float) -> float:
    a, b, c = _coefficients(a1, a2)
    return 3.0 * a * t * t + 2.0 * b * t + c


class CubicBezier:
    """A CSS-style ``cubic-bezier(x1, y1, x2, y2)`` timing curve.

    Calling the curve with a progress fraction returns the eased fraction.
    The x-for-t inversion uses a sample table, refined by Newton-Raphson when
    the slope allows it and binary subdivision otherwise.
    """

    def __init__(self, x1: float, y1: float, x2: float, y2: float) -> None:
        if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
            raise ValueError(f"Bezier x values must be in [0, 1], got x1={x1}, x2={x2}")
        if not all(math.isfinite(p) for p in (y1, y2)):
            raise ValueError(f"Bezier y values must be finite, got y1={y1}, y2={y2}")
        self.points = (float(x1), float(y1), float(x2), float(y2))
        self._linear = x1 == y1 and x2 == y2
        self._samples = _bezier(np.linspace(0.0, 1.0, _SPLINE_TABLE_SIZE), x1, x2)

    @property
    def is_linear(self) -> bool:
        return self._linear

    def __repr__(self) -> str:
        return "CubicBezier(%g, %g, %g, %g)" % self.points

    def __call__(self, progress: float) -> float:
        if progress <= 0.0:
            return 0.0
        if progress >= 1.0:
            return 1.0
        if self._linear:
            return progress
        _, y1, _, y2 = self.points
        return float(_bezier(self._t_for_x(progress), y1, y2))

    def _t_for_x(self, x: float) -> float:
        x1, _, x2, _ = self.points
        samples = self._samples

        index = int(np.searchsorted(samples, x, side="right")) - 1
        index = max(0, min(index, _SPLINE_TABLE_SIZE - 2))
        interval_start = index * _SAMPLE_STEP

        span = samples[index + 1] - samples[index]
        dist = (x - samples[index]) / span if span else 0.0
        guess = interval_start + dist * _SAMPLE_STEP

        initial_slope = _slope(guess, x1, x2)
        if initial_slope >= _NEWTON_MIN_SLOPE:
            return self._newton_raphson(x, guess)
        if initial_slope == 0.0:
            return guess
        return self._binary_subdivide(x, interval_start, interval_start + _SAMPLE_STEP)

    def _newton_raphson(self, x: float, guess: float) -> float:
        x1, _, x2, _ = self.points
        for _ in range(_NEWTON_ITERATIONS):
            slope = _slope(guess, x1, x2)
            if slope == 0.0:
                return guess
            guess -= (_bezier(guess, x1, x2) - x) / slope
        return guess

    def _binary_subdivide(self, x: float, lower: float, upper: float) -> float:
        x1, _, x2, _ = self.points
        t = lower
        for _ in range(_SUBDIVISION_MAX_ITERATIONS):
            t = lower + (upper - lower) / 2.0
            delta = _bezier(t, x1, x2) - x
            if abs(delta) <= _SUBDIVISION_PRECISION:
                break
            if delta > 0.0:
                upper = t
            else:
                lower = t
        return t


def _valid_points(value: Any) -> bool:
    if isinstance(value, (str, bytes)):
        return False
    try:
        points = list(value)
    except TypeError:
        return False
    if len(points) != 4:
        return False
    if not all(isinstance(p, numbers.Real) and not isinstance(p, bool) for p in points):
        return False
    if not all(math.isfinite(p) for p in points):
        return False
    return 0.0 <= points[0] <= 1.0 and 0.0 <= points[2] <= 1.0


def create_easing(timing_function: Any) -> CubicBezier:
    """Build a timing curve from a preset name or four control-point values.

    Unsupported input is logged and replaced by the linear preset.
    """
    if isinstance(timing_function, str):
        preset = PRESET_TIMING_FUNCTIONS.get(timing_function.lower().strip())
        if preset is not None:
            return CubicBezier(*preset)
    elif _valid_points(timing_function):
        return CubicBezier(*timing_function)

    logger.warning("Unsupported timing function %r, falling back to linear", timing_function)
    return CubicBezier(*PRESET_TIMING_FUNCTIONS["linear"])
