import random
from typing import Any, Dict, Optional, Sequence, Tuple

from capabilities import Quantization
from tasks.compute import ComputeTask
from tasks.factors import compute_factor, tensor_factor

MAX_SPARSITY = 0.95


class TensorTask(ComputeTask):
    """Compute task over a tensor of a given shape and quantization.

    ``sparsity`` is sampled once from ``rng`` (the module-level generator when
    omitted) and never changes afterwards. The shape is copied on the way in
    and on the way out.
    """

    factors = (compute_factor, tensor_factor)

    def __init__(self, task_id, priority, memory_size, compute_units, batch_size,
                 dimensions: Sequence[int], tensor_type: Optional[Quantization],
                 rng: Optional[random.Random] = None):
        self._dimensions = list(dimensions)
        self._tensor_type = tensor_type
        self._sparsity = min((rng or random).random(), MAX_SPARSITY)
        super().__init__(task_id, priority, memory_size, compute_units, batch_size)

    @property
    def dimensions(self) -> Tuple[int, ...]:
        return tuple(self._dimensions)

    @dimensions.setter
    def dimensions(self, value: Sequence[int]):
        self._dimensions = list(value)
        self._recompute()

    @property
    def tensor_type(self) -> Optional[Quantization]:
        return self._tensor_type

    @tensor_type.setter
    def tensor_type(self, value: Optional[Quantization]):
        self._tensor_type = value
        self._recompute()

    @property
    def sparsity(self) -> float:
        return self._sparsity

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(dimensions=list(self._dimensions),
                    tensor_type=self._tensor_type.value if self._tensor_type else None,
                    sparsity=self._sparsity)
        return data
