from typing import Any, Dict, Optional

from capabilities import Operation
from tasks.base import clamp
from tasks.compute import ComputeTask
from tasks.factors import compute_factor, vector_factor


class VectorTask(ComputeTask):
    factors = (compute_factor, vector_factor)

    def __init__(self, task_id, priority, memory_size, compute_units, batch_size,
                 vector_size, operation: Optional[Operation]):
        self._vector_size = clamp(int(vector_size), 1)
        self._vector_operation = operation
        self._is_optimized = False
        super().__init__(task_id, priority, memory_size, compute_units, batch_size)

    def optimize(self):
        """Apply the one-time optimization discount. Repeated calls are no-ops."""
        if not self._is_optimized:
            self._is_optimized = True
            self._recompute()

    @property
    def vector_size(self) -> int:
        return self._vector_size

    @vector_size.setter
    def vector_size(self, value):
        self._vector_size = clamp(int(value), 1)
        self._recompute()

    @property
    def vector_operation(self) -> Optional[Operation]:
        return self._vector_operation

    @vector_operation.setter
    def vector_operation(self, value: Optional[Operation]):
        self._vector_operation = value
        self._recompute()

    @property
    def is_optimized(self) -> bool:
        return self._is_optimized

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(vector_size=self._vector_size,
                    vector_operation=self._vector_operation.value if self._vector_operation else None,
                    is_optimized=self._is_optimized)
        return data
