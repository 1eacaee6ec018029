from typing import Any, Dict, Optional

from capabilities import SyncMode
from tasks.base import Task, clamp
from tasks.factors import sync_factor

MAX_BUFFER_SIZE = 256
MAX_LATENCY = 10000
MIN_VOLTAGE_SCALE = 0.1
MAX_VOLTAGE_SCALE = 2.0


class SyncTask(Task):
    """Synchronization-bound task.

    ``latency`` and ``voltage_scale`` are clamped and stored but do not take part
    in the execution-time derivation.
    """

    factors = (sync_factor,)

    def __init__(self, task_id, priority, memory_size, frequency, buffer_size,
                 mode: Optional[SyncMode]):
        self._frequency = clamp(float(frequency), 1.0)
        self._buffer_size = clamp(int(buffer_size), 1, MAX_BUFFER_SIZE)
        self._mode = mode
        self._latency = 1
        self._voltage_scale = 1.0
        super().__init__(task_id, priority, memory_size)

    @property
    def frequency(self) -> float:
        return self._frequency

    @frequency.setter
    def frequency(self, value):
        self._frequency = clamp(float(value), 1.0)
        self._recompute()

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @buffer_size.setter
    def buffer_size(self, value):
        self._buffer_size = clamp(int(value), 1, MAX_BUFFER_SIZE)
        self._recompute()

    @property
    def mode(self) -> Optional[SyncMode]:
        return self._mode

    @property
    def latency(self) -> int:
        return self._latency

    @latency.setter
    def latency(self, value):
        self._latency = clamp(int(value), 1, MAX_LATENCY)
        self._recompute()

    @property
    def voltage_scale(self) -> float:
        return self._voltage_scale

    @voltage_scale.setter
    def voltage_scale(self, value):
        self._voltage_scale = clamp(float(value), MIN_VOLTAGE_SCALE, MAX_VOLTAGE_SCALE)
        self._recompute()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(frequency=self._frequency,
                    buffer_size=self._buffer_size,
                    mode=self._mode.value if self._mode else None,
                    latency=self._latency,
                    voltage_scale=self._voltage_scale)
        return data
