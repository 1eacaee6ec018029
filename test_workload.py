import pytest

from capabilities import MemoryTier, Status
from tasks.memory import MemoryTask
from tasks.sync import SyncTask
from tasks.tensor import TensorTask
from tasks.vector import VectorTask
from workload import SCENARIOS, generate_workload


@pytest.mark.parametrize("scenario", SCENARIOS)
def test_every_scenario_builds_pending_tasks(scenario):
    tasks = generate_workload(scenario, num_tasks=12, seed=1)
    assert len(tasks) == 12
    assert all(task.status == Status.PENDING for task in tasks)
    assert all(task.execution_time > 0 for task in tasks)
    assert sorted(task.task_id for task in tasks) == list(range(1, 13))


def test_tasks_are_ordered_by_priority():
    tasks = generate_workload("mixed", num_tasks=30, seed=3)
    priorities = [task.priority for task in tasks]
    assert priorities == sorted(priorities, reverse=True)


def test_same_seed_same_workload():
    first = [t.to_dict() for t in generate_workload("ml_training", num_tasks=10, seed=11)]
    second = [t.to_dict() for t in generate_workload("ml_training", num_tasks=10, seed=11)]
    assert first == second


def test_data_transfer_covers_every_tier():
    tasks = generate_workload("data_transfer", num_tasks=8, seed=2)
    assert all(isinstance(task, MemoryTask) for task in tasks)
    assert {task.memory_type for task in tasks} == set(MemoryTier)


def test_ml_training_uses_compute_kernels():
    tasks = generate_workload("ml_training", num_tasks=20, seed=5)
    assert all(isinstance(task, (TensorTask, VectorTask)) for task in tasks)


def test_synchronization_scenario():
    tasks = generate_workload("synchronization", num_tasks=6, seed=4)
    assert all(isinstance(task, SyncTask) for task in tasks)


def test_start_id_offsets_ids():
    tasks = generate_workload("mixed", num_tasks=5, seed=0, start_id=100)
    assert sorted(task.task_id for task in tasks) == [100, 101, 102, 103, 104]


def test_unknown_scenario_rejected():
    with pytest.raises(ValueError):
        generate_workload("bursty")
