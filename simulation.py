# simulation.py
"""
Handles the particle field physics and the proximity link search.

This module defines the Simulation class, which advances the particle
field by one frame: counter-driven velocity jitter, damping, integration
and toroidal wraparound. It also provides the pairwise distance search
used to draw proximity links between nearby particles.
"""
import logging
import numpy as np
from typing import Dict, Any, Tuple
from numba import jit

from particle import ParticleField

# --- Data Contracts ---
#
# jitter_magnitude(count: float, scale: float, cap: float) -> float:
#   - Outputs: min(cap, max(0, count * scale)). Never stored; derived from
#     the counter every frame.
#
# class Simulation:
#   - __init__(self, field: ParticleField, params: Dict[str, Any]):
#     - Inputs:
#       - field: An initialized ParticleField object.
#       - params: The "particle_field" section of config.json.
#         - "damping": float in (0, 1] (default 0.98)
#     - Side Effects: Stores a reference to the field.
#
#   - step(self, jitter: float) -> None:
#     - Side Effects: Mutates field.velocities and field.positions in place.
#     - Invariants: Particle count remains constant. Every position lies in
#       [0, width) x [0, height) afterwards. Speed after the step is at most
#       damping * (previous speed + jitter step), so it cannot grow without
#       bound.
#
# proximity_links(positions, threshold, max_alpha) -> (pairs, alphas):
#   - Outputs: pairs is an (M, 2) int64 array of (i, j) with i < j, alphas
#     an (M,) float64 array. A pair is present only when its distance is
#     strictly below threshold; alpha = (1 - dist / threshold) * max_alpha.

DEFAULT_DAMPING = 0.98
DEFAULT_JITTER_SCALE = 0.05
DEFAULT_JITTER_CAP = 6.0
JITTER_STEP = 0.01
DEFAULT_LINK_THRESHOLD = 90.0
DEFAULT_LINK_MAX_ALPHA = 0.35


def jitter_magnitude(count: float, scale: float = DEFAULT_JITTER_SCALE,
                     cap: float = DEFAULT_JITTER_CAP) -> float:
    """Converts the HUD counter value into a bounded jitter magnitude."""
    return float(min(cap, max(0.0, count * scale)))


def max_jitter_step(jitter: float) -> float:
    """Largest speed a single jitter kick can add to one particle."""
    return JITTER_STEP * jitter * np.sqrt(2.0)


def _wrap_axis(coords: np.ndarray, bound: float) -> None:
    """Wraps one coordinate column in place onto [0, bound)."""
    coords[coords >= bound] = 0.0
    # Crossing the low edge lands on the opposite edge, just inside it.
    coords[coords < 0.0] = np.nextafter(bound, 0.0)


@jit(nopython=True)
def _proximity_links_numba(positions, threshold, max_alpha):
    """
    Numba-jitted pairwise distance search over every unordered pair.

    Cost is O(n^2); the field only ever holds a few dozen particles.
    """
    particle_count = positions.shape[0]
    max_pairs = particle_count * (particle_count - 1) // 2
    pairs = np.empty((max_pairs, 2), dtype=np.int64)
    alphas = np.empty(max_pairs, dtype=np.float64)
    found = 0

    for i in range(particle_count):
        for j in range(i + 1, particle_count):
            dx = positions[i, 0] - positions[j, 0]
            dy = positions[i, 1] - positions[j, 1]
            distance = np.sqrt(dx * dx + dy * dy)
            if distance < threshold:
                pairs[found, 0] = i
                pairs[found, 1] = j
                alphas[found] = (1.0 - distance / threshold) * max_alpha
                found += 1

    return pairs[:found], alphas[:found]


def proximity_links(
    positions: np.ndarray,
    threshold: float = DEFAULT_LINK_THRESHOLD,
    max_alpha: float = DEFAULT_LINK_MAX_ALPHA,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Finds every pair of particles closer than `threshold`.

    Args:
        positions (np.ndarray): (N, 2) particle positions.
        threshold (float): Link distance; pairs at or beyond it are skipped.
        max_alpha (float): Stroke alpha of a link of length zero.

    Returns:
        Tuple[np.ndarray, np.ndarray]: The (M, 2) index pairs and their alphas.
    """
    if threshold <= 0:
        raise ValueError(f"Link threshold must be positive, got {threshold}.")
    positions = np.ascontiguousarray(positions, dtype=np.float64).reshape(-1, 2)
    return _proximity_links_numba(positions, float(threshold), float(max_alpha))


class Simulation:
    """
    Advances the particle field one frame at a time.
    """
    def __init__(self, field: ParticleField, params: Dict[str, Any]):
        """
        Initializes the physics step.

        Args:
            field (ParticleField): The particle field to simulate.
            params (Dict[str, Any]): Particle field parameters from config.
        """
        self.field = field
        self.damping = float(params.get('damping', DEFAULT_DAMPING))
        self.jitter_scale = float(params.get('jitter_scale', DEFAULT_JITTER_SCALE))
        self.jitter_cap = float(params.get('jitter_cap', DEFAULT_JITTER_CAP))

        if not 0.0 < self.damping <= 1.0:
            msg = f"Configuration error: damping must be in (0, 1], got {self.damping}."
            logging.critical(msg)
            raise ValueError(msg)
        if self.jitter_cap < 0:
            msg = f"Configuration error: jitter_cap must be >= 0, got {self.jitter_cap}."
            logging.critical(msg)
            raise ValueError(msg)

        logging.info(
            f"Simulation initialized (damping {self.damping}, "
            f"jitter cap {self.jitter_cap})."
        )

    def jitter_for(self, count: float) -> float:
        return jitter_magnitude(count, self.jitter_scale, self.jitter_cap)

    def step(self, jitter: float) -> None:
        """
        Executes one frame of the physics step.

        Args:
            jitter (float): Jitter magnitude for this frame, 0 to jitter_cap.
        """
        field = self.field
        velocities = field.velocities
        jitter = min(max(float(jitter), 0.0), self.jitter_cap)

        # 1. Random kick, only when the counter asks for one
        if jitter > 0:
            spread = JITTER_STEP * jitter
            velocities += field.rng.uniform(-spread, spread, size=velocities.shape)

        # 2. Damping
        velocities *= self.damping

        # 3. Integration
        field.positions += velocities

        # 4. Toroidal wraparound
        _wrap_axis(field.positions[:, 0], field.width)
        _wrap_axis(field.positions[:, 1], field.height)
