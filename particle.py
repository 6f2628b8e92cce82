# particle.py
"""
Manages the state of the HUD particle field.

This module defines the ParticleField class, which is responsible for
initializing and storing particle data (position and velocity) in NumPy
arrays, together with the canvas bounds the particles live in.
"""
import logging
import numpy as np
from typing import Dict, Any, Optional

# --- Data Contracts ---
#
# class ParticleField:
#   - __init__(self, params: Dict[str, Any], width: float, height: float):
#     - Inputs:
#       - params: The "particle_field" section of config.json.
#         - "seed": int or null
#         - "particle_count": int (default 48)
#         - "initial_speed": float (default 0.6)
#       - width: float, width of the canvas.
#       - height: float, height of the canvas.
#     - Outputs: None
#     - Side Effects: Initializes internal NumPy arrays for particle state.
#     - Invariants:
#       - self.positions is a NumPy array of shape (N, 2) of dtype float64.
#       - self.velocities is a NumPy array of shape (N, 2) of dtype float64.
#       - N never changes for the lifetime of the field.
#
#   - resize(self, width: float, height: Optional[float] = None) -> None:
#     - Side Effects: Updates the bounds. Particle positions are untouched;
#       the next physics step wraps anything now outside the bounds.

DEFAULT_PARTICLE_COUNT = 48
DEFAULT_INITIAL_SPEED = 0.6


def _validate_bounds(width: float, height: float) -> None:
    if width <= 0 or height <= 0:
        msg = f"Configuration error: canvas bounds must be positive, got {width}x{height}."
        logging.critical(msg)
        raise ValueError(msg)


class ParticleField:
    """
    A fixed-size pool of particles, stored as NumPy arrays.
    """
    def __init__(self, params: Dict[str, Any], width: float, height: float):
        """
        Initializes the particle field.

        Args:
            params (Dict[str, Any]): Particle field parameters from config.
            width (float): The width of the canvas.
            height (float): The height of the canvas.
        """
        self.particle_count = int(params.get('particle_count', DEFAULT_PARTICLE_COUNT))
        self.initial_speed = float(params.get('initial_speed', DEFAULT_INITIAL_SPEED))
        self.seed = params.get('seed')

        if self.particle_count < 0:
            msg = f"Configuration error: particle_count must be >= 0, got {self.particle_count}."
            logging.critical(msg)
            raise ValueError(msg)
        _validate_bounds(width, height)

        self.width = float(width)
        self.height = float(height)

        # All randomness for the field, including per-frame jitter, comes
        # from this generator.
        self.rng = np.random.default_rng(self.seed)

        self.positions = self.rng.uniform(
            low=[0.0, 0.0],
            high=[self.width, self.height],
            size=(self.particle_count, 2)
        )
        half_speed = self.initial_speed / 2
        self.velocities = self.rng.uniform(
            low=-half_speed,
            high=half_speed,
            size=(self.particle_count, 2)
        )

        logging.info(
            f"ParticleField initialized with {self.particle_count} particles "
            f"on a {self.width:.0f}x{self.height:.0f} canvas."
        )
        logging.debug(
            f"Particle data arrays created. "
            f"Positions shape: {self.positions.shape}, "
            f"Velocities shape: {self.velocities.shape}"
        )

    @property
    def bounds(self) -> tuple:
        return self.width, self.height

    def resize(self, width: float, height: Optional[float] = None) -> None:
        """Updates the canvas bounds after the hosting container was resized."""
        height = self.height if height is None else height
        _validate_bounds(width, height)
        self.width = float(width)
        self.height = float(height)
        logging.debug(f"ParticleField resized to {self.width:.0f}x{self.height:.0f}.")

    @classmethod
    def from_arrays(cls, positions, velocities, width: float, height: float, seed=None) -> "ParticleField":
        """Builds a field with explicit state; used for scripted scenarios."""
        positions = np.array(positions, dtype=np.float64).reshape(-1, 2)
        velocities = np.array(velocities, dtype=np.float64).reshape(-1, 2)
        if positions.shape != velocities.shape:
            raise ValueError(
                f"positions {positions.shape} and velocities {velocities.shape} must match."
            )
        field = cls({'particle_count': 0, 'seed': seed}, width, height)
        field.particle_count = positions.shape[0]
        field.positions = positions
        field.velocities = velocities
        return field
