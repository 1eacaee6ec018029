from typing import Any, Dict

from tasks.base import Task, clamp
from tasks.factors import compute_factor

MIN_BATCH_SIZE = 2


def normalize_batch_size(size) -> int:
    # floors odd sizes to the even value below, never rounds up
    return clamp((int(size) // 2) * 2, MIN_BATCH_SIZE)


class ComputeTask(Task):
    factors = (compute_factor,)

    def __init__(self, task_id, priority, memory_size, compute_units, batch_size):
        self._compute_units = clamp(int(compute_units), 1)
        self._batch_size = normalize_batch_size(batch_size)
        self._efficiency = 0.0
        super().__init__(task_id, priority, memory_size)

    def _recompute(self):
        super()._recompute()
        self._efficiency = (self._compute_units * self._batch_size) / 100.0

    @property
    def compute_units(self) -> int:
        return self._compute_units

    @compute_units.setter
    def compute_units(self, value):
        self._compute_units = clamp(int(value), 1)
        self._recompute()

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @batch_size.setter
    def batch_size(self, value):
        self._batch_size = normalize_batch_size(value)
        self._recompute()

    @property
    def efficiency(self) -> float:
        return self._efficiency

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(compute_units=self._compute_units,
                    batch_size=self._batch_size,
                    efficiency=self._efficiency)
        return data
