from typing import Any, Dict, Optional

from capabilities import MemoryTier
from tasks.base import Task, clamp
from tasks.factors import memory_factor


class MemoryTask(Task):
    """Transfer-bound task. The memory tier is fixed at construction."""

    factors = (memory_factor,)

    def __init__(self, task_id, priority, memory_size, bandwidth,
                 memory_type: Optional[MemoryTier]):
        self._bandwidth = clamp(int(bandwidth), 1)
        self._memory_type = memory_type
        super().__init__(task_id, priority, memory_size)

    @property
    def bandwidth(self) -> int:
        return self._bandwidth

    @bandwidth.setter
    def bandwidth(self, value):
        self._bandwidth = clamp(int(value), 1)
        self._recompute()

    @property
    def memory_type(self) -> Optional[MemoryTier]:
        return self._memory_type

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(bandwidth=self._bandwidth,
                    memory_type=self._memory_type.value if self._memory_type else None)
        return data
