import math
from types import SimpleNamespace

import pytest

from capabilities import MemoryTier, Operation, Quantization, SyncMode
from tasks.factors import (
    base_time,
    compute_factor,
    derive_execution_time,
    dimension_factor,
    memory_factor,
    sparsity_factor,
    sync_factor,
    tensor_factor,
    vector_factor,
)


def test_base_time_at_minimum_priority_and_no_memory():
    assert base_time(SimpleNamespace(priority=100, memory_size=0)) == pytest.approx(100.0)


def test_base_time_at_maximum_priority():
    # (1 + 39/39) * (1 + 1024/1024)
    assert base_time(SimpleNamespace(priority=139, memory_size=1024)) == pytest.approx(400.0)


def test_compute_factor():
    assert compute_factor(SimpleNamespace(compute_units=4, batch_size=32)) == pytest.approx(0.5)


@pytest.mark.parametrize("dims", [[], [1], [1, 1, 1]])
def test_dimension_factor_is_neutral_for_trivial_shapes(dims):
    assert dimension_factor(dims) == pytest.approx(1.0)


def test_dimension_factor_matches_closed_form():
    dims = [64, 64]
    log_sum = math.log10(64) * 2
    expected = (log_sum + math.log10(1 + 10 ** log_sum)) / math.log10(2)
    assert dimension_factor(dims) == pytest.approx(expected)


def test_dimension_factor_ignores_unit_dimensions():
    assert dimension_factor([1, 128, 1]) == pytest.approx(dimension_factor([128]))


def test_dimension_factor_survives_huge_shapes():
    value = dimension_factor([10 ** 6] * 80)
    assert math.isfinite(value)
    assert value > dimension_factor([10 ** 6] * 40)


@pytest.mark.parametrize("sparsity, expected", [(0.0, 1.0), (0.5, 0.75), (0.95, 0.525)])
def test_sparsity_factor(sparsity, expected):
    assert sparsity_factor(sparsity) == pytest.approx(expected)


def test_sparsity_factor_never_drops_below_floor():
    assert sparsity_factor(5.0) == pytest.approx(0.1)


def test_tensor_factor_without_quantization_is_neutral():
    task = SimpleNamespace(tensor_type=None, dimensions=(512, 512), sparsity=0.3)
    assert tensor_factor(task) == 1.0


def test_tensor_factor_composes_its_parts():
    task = SimpleNamespace(tensor_type=Quantization.FLOAT32, dimensions=(32, 32), sparsity=0.2)
    expected = dimension_factor([32, 32]) * 1.8 * 0.9
    assert tensor_factor(task) == pytest.approx(expected)


@pytest.mark.parametrize("operation, expected", [
    (Operation.ADD, 10.0),
    (Operation.MUL, 12.0),
    (Operation.REDUCE, 15.0),
])
def test_vector_factor_by_operation(operation, expected):
    task = SimpleNamespace(vector_operation=operation, vector_size=1024, is_optimized=False)
    assert vector_factor(task) == pytest.approx(expected)


def test_vector_factor_small_vectors_count_as_two():
    task = SimpleNamespace(vector_operation=Operation.ADD, vector_size=1, is_optimized=False)
    assert vector_factor(task) == pytest.approx(1.0)


def test_vector_factor_optimized_discount():
    task = SimpleNamespace(vector_operation=Operation.ADD, vector_size=4, is_optimized=True)
    assert vector_factor(task) == pytest.approx(2 * 0.7)


def test_vector_factor_without_operation_is_neutral():
    task = SimpleNamespace(vector_operation=None, vector_size=4096, is_optimized=True)
    assert vector_factor(task) == 1.0


@pytest.mark.parametrize("tier, expected", [
    (MemoryTier.CACHE, 0.5),
    (MemoryTier.RAM, 1.0),
    (MemoryTier.VRAM, 1.5),
    (MemoryTier.DISK, 5.0),
    (None, 1.0),
])
def test_memory_factor_by_tier(tier, expected):
    assert memory_factor(SimpleNamespace(bandwidth=1000, memory_type=tier)) == pytest.approx(expected)


def test_sync_factor_caps_frequency_and_buffer_terms():
    task = SimpleNamespace(frequency=1.0, buffer_size=1024, mode=SyncMode.ASYNC)
    assert sync_factor(task) == pytest.approx(10.0 * 4.0)


def test_sync_factor_mode():
    task = SimpleNamespace(frequency=1000.0, buffer_size=64, mode=SyncMode.BARRIER)
    assert sync_factor(task) == pytest.approx(2.0)


def test_sync_factor_without_mode_is_neutral():
    task = SimpleNamespace(frequency=1.0, buffer_size=256, mode=None)
    assert sync_factor(task) == 1.0


def test_derive_execution_time_applies_factors_in_order():
    task = SimpleNamespace(priority=100, memory_size=0)
    factors = (lambda t: 0.5, lambda t: 3.0)
    assert derive_execution_time(task, factors) == 150


def test_derive_execution_time_never_reaches_zero():
    task = SimpleNamespace(priority=100, memory_size=0)
    assert derive_execution_time(task, (lambda t: 1e-9,)) == 1
