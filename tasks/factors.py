"""Execution-time derivation for NPU tasks.

Every task starts from ``base_time`` and multiplies in the adjustment factors its
class declares, in declaration order. Each factor is a plain function of the task
so it can be evaluated (and tested) on its own.
"""
import math
from typing import Callable, Dict, Sequence

import numpy as np

from capabilities import MemoryTier, Operation, Quantization, SyncMode

BASE_TIME = 100
PRIORITY_SPAN = 39.0
MEMORY_UNIT = 1024.0

QUANTIZATION_FACTORS: Dict[Quantization, float] = {
    Quantization.FLOAT32: 1.8,
    Quantization.INT8: 0.4,
    Quantization.BFLOAT16: 1.0,
}

OPERATION_FACTORS: Dict[Operation, float] = {
    Operation.ADD: 1.0,
    Operation.MUL: 1.2,
    Operation.REDUCE: 1.5,
}

TIER_FACTORS: Dict[MemoryTier, float] = {
    MemoryTier.CACHE: 0.5,
    MemoryTier.RAM: 1.0,
    MemoryTier.VRAM: 1.5,
    MemoryTier.DISK: 5.0,
}

SYNC_MODE_FACTORS: Dict[SyncMode, float] = {
    SyncMode.BARRIER: 2.0,
    SyncMode.PIPELINE: 1.2,
    SyncMode.WAVEFRONT: 1.5,
    SyncMode.ASYNC: 1.0,
}

OPTIMIZED_FACTOR = 0.7
MIN_SPARSITY_FACTOR = 0.1
MAX_FREQUENCY_FACTOR = 10.0
MAX_BUFFER_FACTOR = 4.0

_LN10 = math.log(10.0)


def base_time(task) -> float:
    priority_factor = (task.priority - 100) / PRIORITY_SPAN
    memory_factor = task.memory_size / MEMORY_UNIT
    return BASE_TIME * (1 + priority_factor) * (1 + memory_factor)


def compute_factor(task) -> float:
    return (1.0 / task.compute_units) * (task.batch_size / 16.0)


def dimension_factor(dimensions: Sequence[int]) -> float:
    """Smoothed log2-scale of the tensor element count.

    Only dimensions larger than one contribute. An empty or all-ones shape
    yields exactly 1.0.
    """
    dims = np.asarray(dimensions, dtype=np.float64)
    log_sum = float(np.log10(dims[dims > 1]).sum())
    # log10(1 + 10**log_sum), evaluated in log space so large shapes don't overflow
    smoothed = float(np.logaddexp(0.0, log_sum * _LN10)) / _LN10
    return (log_sum + smoothed) / math.log10(2)


def sparsity_factor(sparsity: float) -> float:
    return max(MIN_SPARSITY_FACTOR, 1.0 - sparsity * 0.5)


def tensor_factor(task) -> float:
    if task.tensor_type is None:
        return 1.0
    return (dimension_factor(task.dimensions)
            * QUANTIZATION_FACTORS[task.tensor_type]
            * sparsity_factor(task.sparsity))


def vector_factor(task) -> float:
    if task.vector_operation is None:
        return 1.0
    size_factor = math.log10(max(2, task.vector_size)) / math.log10(2)
    optimization = OPTIMIZED_FACTOR if task.is_optimized else 1.0
    return size_factor * OPERATION_FACTORS[task.vector_operation] * optimization


def memory_factor(task) -> float:
    if task.memory_type is None:
        return 1.0
    return (1000.0 / task.bandwidth) * TIER_FACTORS[task.memory_type]


def sync_factor(task) -> float:
    if task.mode is None:
        return 1.0
    frequency = min(1000.0 / task.frequency, MAX_FREQUENCY_FACTOR)
    buffer = min(task.buffer_size / 64.0, MAX_BUFFER_FACTOR)
    return frequency * buffer * SYNC_MODE_FACTORS[task.mode]


Factor = Callable[..., float]


def derive_execution_time(task, factors: Sequence[Factor]) -> int:
    """Round the base time, then apply ``factors`` in order to the running integer.

    Each factor multiplies the rounded value of the level before it, and every
    step is floored at 1 so no combination of valid parameters yields a
    zero-length task.
    """
    value = max(1, int(round(base_time(task))))
    for factor in factors:
        value = max(1, int(round(value * factor(task))))
    return value
