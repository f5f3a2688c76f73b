"""Tick clock - convert absolute ticks to elapsed time across a tempo map."""

import numpy as np
from typing import List, Optional, Sequence, Union

from .metadata import TempoMarker, ensure_tempo_map
from ..core.constants import DEFAULT_TEMPO_US


class TickClock:
    """Convert tick positions to milliseconds using every tempo change.

    Each tempo segment ``[tick_i, tick_i+1)`` contributes
    ``span / ppq * us_per_quarter_i / 1000`` milliseconds; the last segment
    is open-ended.
    """

    def __init__(
        self,
        tempo_map: Optional[List[TempoMarker]],
        ppq: int,
        default_tempo_us: int = DEFAULT_TEMPO_US,
    ):
        """
        Initialize TickClock.

        Args:
            tempo_map: Tempo markers (any order, may be empty)
            ppq: Pulses per quarter note, must be positive
            default_tempo_us: Tempo used before the first marker

        Raises:
            ValueError: If ppq is not positive
        """
        if ppq <= 0:
            raise ValueError(f"PPQ must be positive, got {ppq}")

        self.ppq = ppq
        self.tempo_map = ensure_tempo_map(tempo_map or [], default_tempo_us)

        self._ticks = np.array([m.tick for m in self.tempo_map], dtype=np.int64)
        # Milliseconds per tick within each segment
        self._ms_per_tick = np.array(
            [m.microseconds_per_quarter / 1000.0 / ppq for m in self.tempo_map],
            dtype=np.float64,
        )
        # Elapsed milliseconds at the start of each segment
        spans = np.diff(self._ticks)
        self._offsets = np.concatenate(
            ([0.0], np.cumsum(spans * self._ms_per_tick[:-1]))
        )

    def ticks_to_ms(self, tick: int) -> float:
        """Elapsed milliseconds from tick 0 to ``tick``."""
        return float(self.ticks_to_ms_array([tick])[0])

    def ticks_to_ms_array(self, ticks: Union[Sequence[int], np.ndarray]) -> np.ndarray:
        """Vectorized ``ticks_to_ms`` for many positions."""
        ticks = np.asarray(ticks, dtype=np.int64)
        segment = np.searchsorted(self._ticks, ticks, side="right") - 1
        segment = np.clip(segment, 0, len(self._ticks) - 1)
        return self._offsets[segment] + (ticks - self._ticks[segment]) * self._ms_per_tick[segment]

    def ticks_to_seconds(self, tick: int) -> float:
        """Elapsed seconds from tick 0 to ``tick``."""
        return self.ticks_to_ms(tick) / 1000.0
