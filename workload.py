import random
from typing import List

from capabilities import MemoryTier, Operation, Quantization, SyncMode
from tasks.base import Task
from tasks.compute import ComputeTask
from tasks.memory import MemoryTask
from tasks.sync import SyncTask
from tasks.tensor import TensorTask
from tasks.vector import VectorTask

SCENARIOS = ["ml_training", "data_transfer", "synchronization", "mixed"]

TENSOR_SHAPES = [
    [32, 32],
    [64, 64, 3],
    [128, 128],
    [256, 256, 3],
    [512, 512],
    [16, 1024],
]


def _tensor_task(task_id):
    return TensorTask(
        task_id,
        priority=random.randint(110, 135),
        memory_size=random.choice([1024, 2048, 4096]),
        compute_units=random.choice([4, 8, 16]),
        batch_size=random.choice([16, 32, 64]),
        dimensions=random.choice(TENSOR_SHAPES),
        tensor_type=random.choice(list(Quantization)),
    )


def _vector_task(task_id):
    task = VectorTask(
        task_id,
        priority=random.randint(100, 130),
        memory_size=random.choice([512, 1024, 2048]),
        compute_units=random.choice([2, 4, 8]),
        batch_size=random.choice([8, 16, 32]),
        vector_size=random.choice([256, 1024, 4096]),
        operation=random.choice(list(Operation)),
    )
    if random.random() < 0.5:
        task.optimize()
    return task


def _compute_task(task_id):
    return ComputeTask(
        task_id,
        priority=random.randint(100, 139),
        memory_size=random.choice([1024, 2048]),
        compute_units=random.choice([2, 4, 8]),
        batch_size=random.choice([16, 32]),
    )


def _memory_task(task_id, tier=None):
    return MemoryTask(
        task_id,
        priority=random.randint(105, 125),
        memory_size=random.choice([2048, 4096, 8192]),
        bandwidth=random.choice([500, 1000, 2000, 4000]),
        memory_type=tier or random.choice(list(MemoryTier)),
    )


def _sync_task(task_id):
    task = SyncTask(
        task_id,
        priority=random.randint(100, 139),
        memory_size=random.choice([512, 1024, 2048]),
        frequency=random.choice([500.0, 1000.0, 2000.0]),
        buffer_size=random.choice([32, 64, 128, 256]),
        mode=random.choice(list(SyncMode)),
    )
    task.latency = random.randint(1, 500)
    task.voltage_scale = random.uniform(0.8, 1.2)
    return task


def generate_workload(scenario="mixed", num_tasks=20, seed=None, start_id=1) -> List[Task]:
    if seed is not None:
        random.seed(seed)
    if scenario not in SCENARIOS:
        raise ValueError(f"Unknown scenario {scenario!r}, expected one of {SCENARIOS}")

    tasks = []
    tiers = list(MemoryTier)

    for i in range(num_tasks):
        task_id = start_id + i

        if scenario == "ml_training":
            # mostly tensor kernels with the occasional elementwise pass
            if random.random() < 0.75:
                task = _tensor_task(task_id)
            else:
                task = _vector_task(task_id)

        elif scenario == "data_transfer":
            # cycle through the tiers so every tier is represented
            task = _memory_task(task_id, tier=tiers[i % len(tiers)])

        elif scenario == "synchronization":
            task = _sync_task(task_id)

        else:  # mixed
            builder = random.choice([_compute_task, _tensor_task, _vector_task,
                                     _memory_task, _sync_task])
            task = builder(task_id)

        tasks.append(task)

    return sorted(tasks, key=lambda t: t.priority, reverse=True)
