"""Bounded integer generation with reproducible seeding modes.

:class:`SeededGenerator` owns a single :class:`random.Random` engine.  Draws go
through a pluggable :class:`DrawStrategy`:

``ProductionStrategy``
    Continues the engine's stream, one ``randint`` per draw.

``ReproducibleStrategy``
    Reseeds the engine with ``base_seed + draw_index`` before every draw.  Any
    draw position can therefore be recomputed in isolation, and restarting the
    index replays the exact same sequence no matter how many production draws
    happened in between.

Seeded one-off draws (:meth:`SeededGenerator.generate_with_seed`) snapshot the
engine state, reseed, draw and restore, all under the instance lock, so they
never leak into the stream seen by other callers.
"""

from __future__ import annotations

import logging
import random
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Iterator, Protocol, Tuple

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_MIN_VALUE = 1
DEFAULT_MAX_VALUE = 100
DEFAULT_SEED = 12345


@dataclass(frozen=True)
class RangeConfig:
    """Inclusive ``[minimum, maximum]`` bounds for generated values."""

    minimum: int = DEFAULT_MIN_VALUE
    maximum: int = DEFAULT_MAX_VALUE

    @classmethod
    def validated(cls, minimum: int, maximum: int) -> "RangeConfig":
        """Return a checked range, clamping ``minimum`` to 1 when lower.

        Raises :class:`ConfigurationError` when ``minimum >= maximum`` either
        before or after clamping.
        """

        minimum = int(minimum)
        maximum = int(maximum)
        if minimum >= maximum:
            raise ConfigurationError(
                f"Invalid range: {minimum} to {maximum}. Min must be less than max."
            )
        if minimum < 1:
            logger.warning("Minimum value %d is less than 1. Adjusting to 1.", minimum)
            minimum = 1
            if minimum >= maximum:
                raise ConfigurationError(
                    f"Invalid range after clamping minimum: {minimum} to {maximum}."
                )
        return cls(minimum=minimum, maximum=maximum)

    @property
    def size(self) -> int:
        return self.maximum - self.minimum + 1

    def contains(self, value: int) -> bool:
        return self.minimum <= value <= self.maximum

    def values(self) -> range:
        return range(self.minimum, self.maximum + 1)

    def __str__(self) -> str:
        return f"{self.minimum}-{self.maximum}"


@dataclass(frozen=True)
class RNGState:
    """Opaque snapshot of the engine state taken by :meth:`SeededGenerator.snapshot`."""

    payload: Tuple[Any, ...]


class DrawStrategy(Protocol):
    """Protocol implemented by the interchangeable draw strategies."""

    name: str

    def draw(self, engine: random.Random, bounds: RangeConfig) -> int:
        """Draw a single value in ``bounds`` from ``engine``."""


class ProductionStrategy:
    name = "production"

    def draw(self, engine: random.Random, bounds: RangeConfig) -> int:
        return engine.randint(bounds.minimum, bounds.maximum)


class ReproducibleStrategy:
    """Reseed the engine from ``base_seed + draw_index`` before each draw."""

    name = "reproducible"

    def __init__(self, base_seed: int) -> None:
        self.base_seed = base_seed
        self.draw_index = 0

    def draw(self, engine: random.Random, bounds: RangeConfig) -> int:
        engine.seed(self.base_seed + self.draw_index)
        value = engine.randint(bounds.minimum, bounds.maximum)
        logger.debug(
            "Deterministic draw %d (seed %d): %d",
            self.draw_index,
            self.base_seed + self.draw_index,
            value,
        )
        self.draw_index += 1
        return value

    def reset(self) -> None:
        self.draw_index = 0


class SeededGenerator:
    """Uniform integer generator over a :class:`RangeConfig`."""

    def __init__(
        self,
        range_config: RangeConfig | None = None,
        *,
        deterministic_mode: bool = False,
        seed: int = DEFAULT_SEED,
        engine: random.Random | None = None,
    ) -> None:
        self._range = range_config or RangeConfig()
        self._engine = engine or random.Random()
        self._lock = threading.RLock()
        self._seed = seed
        self._strategy: DrawStrategy = ProductionStrategy()
        self._current_target = 0
        self._production_state: RNGState | None = None
        if deterministic_mode:
            self.enable_deterministic_mode(seed)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def range_config(self) -> RangeConfig:
        return self._range

    @property
    def min_value(self) -> int:
        return self._range.minimum

    @property
    def max_value(self) -> int:
        return self._range.maximum

    def set_range(self, minimum: int, maximum: int) -> bool:
        """Replace the generation range, keeping the old one when invalid."""

        try:
            new_range = RangeConfig.validated(minimum, maximum)
        except ConfigurationError as exc:
            logger.error("%s Keeping range %s.", exc, self._range)
            return False
        with self._lock:
            self._range = new_range
        logger.info("Generator range updated to %s", new_range)
        return True

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def next(self) -> int:
        """Draw the next value through the active strategy."""

        with self._lock:
            value = self._strategy.draw(self._engine, self._range)
            self._current_target = value
        return value

    generate_next = next

    def generate_with_seed(self, seed: int) -> int:
        """Draw one value from an engine freshly seeded with ``seed``.

        The engine state is restored afterwards and the deterministic draw
        index is left untouched.
        """

        with self.seeded(seed):
            value = self._engine.randint(self._range.minimum, self._range.maximum)
            self._current_target = value
        logger.debug("Generated with seed %d: %d", seed, value)
        return value

    # ------------------------------------------------------------------
    # State management
    # ------------------------------------------------------------------
    def snapshot(self) -> RNGState:
        with self._lock:
            return RNGState(self._engine.getstate())

    def restore(self, state: RNGState) -> None:
        with self._lock:
            self._engine.setstate(state.payload)

    @contextmanager
    def seeded(self, seed: int) -> Iterator[random.Random]:
        """Hold the lock with the engine reseeded, restoring it on exit."""

        with self._lock:
            saved = self.snapshot()
            self._engine.seed(seed)
            try:
                yield self._engine
            finally:
                self.restore(saved)

    # ------------------------------------------------------------------
    # Deterministic mode
    # ------------------------------------------------------------------
    @property
    def deterministic_mode(self) -> bool:
        return isinstance(self._strategy, ReproducibleStrategy)

    @property
    def deterministic_seed(self) -> int:
        return self._seed

    @property
    def draw_index(self) -> int:
        if isinstance(self._strategy, ReproducibleStrategy):
            return self._strategy.draw_index
        return 0

    @property
    def strategy(self) -> DrawStrategy:
        return self._strategy

    def enable_deterministic_mode(self, seed: int) -> None:
        """Switch to reproducible draws; the production stream is parked until disabled."""

        with self._lock:
            if self._production_state is None:
                self._production_state = self.snapshot()
            self._seed = seed
            self._strategy = ReproducibleStrategy(seed)
            self._engine.seed(seed)
        logger.info("Deterministic mode enabled with seed %d", seed)

    def disable_deterministic_mode(self) -> None:
        """Return to production draws, resuming the stream parked on enable."""

        with self._lock:
            self._strategy = ProductionStrategy()
            if self._production_state is not None:
                self.restore(self._production_state)
                self._production_state = None
        logger.info("Deterministic mode disabled; returning to production draws")

    def set_deterministic_seed(self, seed: int) -> None:
        """Store ``seed``; restart the sequence from it when the mode is on."""

        with self._lock:
            self._seed = seed
            if isinstance(self._strategy, ReproducibleStrategy):
                self._strategy = ReproducibleStrategy(seed)
                self._engine.seed(seed)
                logger.info("Deterministic seed updated to %d", seed)

    @contextmanager
    def deterministic(self, seed: int) -> Iterator["SeededGenerator"]:
        """Run the block in deterministic mode, then put the previous mode back.

        The lock is held for the whole block and the engine state is restored on
        exit, so other callers never see a deterministic draw or a reseeded stream.
        """

        with self._lock:
            was_deterministic = self.deterministic_mode
            original_seed = self._seed
            saved = self.snapshot()
            self.enable_deterministic_mode(seed)
            try:
                yield self
            finally:
                if was_deterministic:
                    self.enable_deterministic_mode(original_seed)
                else:
                    self.disable_deterministic_mode()
                    self._seed = original_seed
                self.restore(saved)

    def reset_sequence(self) -> None:
        with self._lock:
            if isinstance(self._strategy, ReproducibleStrategy):
                self._strategy.reset()
                self._engine.seed(self._seed)
                logger.info("Deterministic sequence reset with seed %d", self._seed)

    def preview_sequence(self, length: int = 10) -> Tuple[int, ...]:
        """Return the first ``length`` deterministic values for the current seed.

        Neither the draw index nor the engine state is changed.
        """

        if not self.deterministic_mode:
            logger.warning("Cannot preview a sequence while deterministic mode is disabled")
            return ()
        preview = ReproducibleStrategy(self._seed)
        with self._lock:
            saved = self.snapshot()
            try:
                values = tuple(preview.draw(self._engine, self._range) for _ in range(length))
            finally:
                self.restore(saved)
        logger.debug("Sequence preview (seed %d): %s", self._seed, values)
        return values

    # ------------------------------------------------------------------
    # Host helpers
    # ------------------------------------------------------------------
    @property
    def current_target(self) -> int:
        return self._current_target

    @property
    def has_target(self) -> bool:
        return self._current_target > 0

    def is_correct(self, guess: int) -> bool:
        return guess == self._current_target

    def compare_to_target(self, guess: int) -> int:
        """Return 1 if the target is higher, -1 if lower, 0 on a match."""

        if guess < self._current_target:
            return 1
        if guess > self._current_target:
            return -1
        return 0

    def validate_current_target(self) -> bool:
        valid = self._range.contains(self._current_target)
        if not valid:
            logger.error(
                "Invalid target detected: %d is outside range %s",
                self._current_target,
                self._range,
            )
        return valid

    def debug_info(self) -> str:
        info = (
            f"SeededGenerator - Target: {self._current_target}, Range: {self._range}, "
            f"HasTarget: {self.has_target}"
        )
        if self.deterministic_mode:
            info += (
                f", DeterministicMode: ON, Seed: {self._seed}, Draw index: {self.draw_index}"
            )
        return info


__all__ = [
    "DEFAULT_SEED",
    "DrawStrategy",
    "ProductionStrategy",
    "RNGState",
    "RangeConfig",
    "ReproducibleStrategy",
    "SeededGenerator",
]
