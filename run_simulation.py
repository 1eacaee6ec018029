import time

from capabilities import MemoryTier, Quantization
from config import get_settings
from log import configure_logging
from simulator import ExecutionEngine
from tasks.compute import ComputeTask
from tasks.memory import MemoryTask
from tasks.tensor import TensorTask
from workload import generate_workload

POLL_INTERVAL = 0.1

TIER_POWER_FACTORS = {
    MemoryTier.CACHE: 0.5,
    MemoryTier.RAM: 1.0,
    MemoryTier.VRAM: 1.5,
    MemoryTier.DISK: 2.0,
}


def adjusted_power(task):
    """Power draw reported after completion, scaled for the task's hardware path."""
    power = task.power_consumption
    if isinstance(task, TensorTask):
        power *= 1.5 if task.tensor_type == Quantization.FLOAT32 else 1.0
    elif isinstance(task, MemoryTask) and task.memory_type is not None:
        power *= TIER_POWER_FACTORS[task.memory_type]
    return power


def wait_for_task(engine, task):
    while engine.is_running(task.task_id):
        time.sleep(POLL_INTERVAL)
    task.power_consumption = adjusted_power(task)
    print(f"Task {task.task_id} finished with status: {task.status.value.upper()}")
    print(f"Power consumption: {task.power_consumption:.2f} units")


def simulate_ml_training(engine, next_id):
    print("--- ML Training Workload ---")
    task = TensorTask(next_id(), 120, 4096, 8, 32, [256, 256, 3], Quantization.FLOAT32)

    print("\nInitiating Tensor Task:")
    print(f"Task ID: {task.task_id}, Dimensions: {list(task.dimensions)}, "
          f"Type: {task.tensor_type.name}")
    print(f"Estimated execution time: {task.execution_time} ms")

    task.execute(engine)
    wait_for_task(engine, task)


def simulate_data_transfer(engine, next_id):
    print("\n--- Data Transfer Workload ---")
    print("\nInitiating Memory Transfers:")

    for i, tier in enumerate(MemoryTier, start=1):
        task = MemoryTask(next_id(), 115, 8192, 1000, tier)
        print(f"\nMemory Task {i}:")
        print(f"Task ID: {task.task_id}, Memory Type: {tier.name}, Bandwidth: {task.bandwidth}")
        print(f"Estimated execution time: {task.execution_time} ms")

        task.execute(engine)
        wait_for_task(engine, task)


def simulate_mixed(engine, next_id):
    print("\n--- Mixed Workload ---")
    task = ComputeTask(next_id(), 125, 2048, 8, 32)

    print("\nInitiating Computation Task:")
    print(f"Task ID: {task.task_id}, Compute Units: {task.compute_units}, "
          f"Efficiency: {task.efficiency:.2f}")
    print(f"Estimated execution time: {task.execution_time} ms")

    task.execute(engine)
    wait_for_task(engine, task)


def simulate_concurrent_batch(engine, next_id, seed=None):
    print("\n--- Concurrent Batch ---")
    tasks = generate_workload("mixed", num_tasks=8, seed=seed, start_id=next_id.peek())
    for _ in tasks:
        next_id()

    for task in tasks:
        task.execute(engine)
    print(f"Submitted {len(tasks)} tasks, {len(engine.running_ids())} in flight")

    for task in tasks:
        wait_for_task(engine, task)


class IdCounter:
    def __init__(self, start=1):
        self._next = start

    def peek(self):
        return self._next

    def __call__(self):
        value = self._next
        self._next += 1
        return value


def main():
    settings = get_settings()
    configure_logging(settings.log_level, settings.json_logs)

    print("=== Starting NPU Workload Simulation ===\n")
    engine = ExecutionEngine.from_settings(settings)
    next_id = IdCounter()

    simulate_ml_training(engine, next_id)
    simulate_data_transfer(engine, next_id)
    simulate_mixed(engine, next_id)
    simulate_concurrent_batch(engine, next_id, seed=settings.seed)

    engine.shutdown()
    print("\n=== Simulation Complete ===")


if __name__ == "__main__":
    main()
