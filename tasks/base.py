from typing import Any, Dict, List, Tuple

import structlog

from capabilities import Status
from tasks.factors import base_time, derive_execution_time

logger = structlog.get_logger(__name__)

MIN_PRIORITY = 100
MAX_PRIORITY = 139
POWER_COEFFICIENT = 0.01


def clamp(value, lower, upper=None):
    value = max(lower, value)
    if upper is not None:
        value = min(upper, value)
    return value


class Task:
    """A unit of simulated NPU work.

    Subclasses assign their own fields *before* calling ``Task.__init__`` so that
    the first recomputation at the end of construction already sees them.
    ``factors`` lists the adjustment functions applied on top of the base time,
    most specialized last.
    """

    factors: Tuple = ()

    def __init__(self, task_id, priority, memory_size):
        self._task_id = task_id
        self._priority = clamp(int(priority), MIN_PRIORITY, MAX_PRIORITY)
        self._memory_size = clamp(int(memory_size), 0)
        self._status = Status.PENDING
        self._power_consumption = 0.0
        self._execution_time = 0
        self._recompute()

    def _recompute(self):
        self._execution_time = derive_execution_time(self, self.factors)

    def _calculate_power_consumption(self):
        self.power_consumption = self._memory_size * POWER_COEFFICIENT * self._priority

    def execute(self, engine) -> bool:
        """Start the task on ``engine`` if it is still pending.

        Returns False (and changes nothing) for any other status.
        """
        if self._status is not Status.PENDING:
            logger.debug("Ignoring execute on non-pending task",
                         task_id=self._task_id, status=self._status.value)
            return False

        self._status = Status.RUNNING
        self._calculate_power_consumption()
        try:
            engine.submit(self)
        except Exception:
            self._status = Status.FAILED
            raise
        return True

    def factor_breakdown(self) -> List[Tuple[str, float]]:
        """Ordered (name, value) pairs that multiply into ``execution_time``."""
        breakdown = [("base", base_time(self))]
        for factor in self.factors:
            breakdown.append((factor.__name__.replace("_factor", ""), factor(self)))
        return breakdown

    @property
    def task_id(self):
        return self._task_id

    @property
    def priority(self) -> int:
        return self._priority

    @priority.setter
    def priority(self, value):
        self._priority = clamp(int(value), MIN_PRIORITY, MAX_PRIORITY)
        self._recompute()

    @property
    def memory_size(self) -> int:
        return self._memory_size

    @memory_size.setter
    def memory_size(self, value):
        self._memory_size = clamp(int(value), 0)
        self._recompute()

    @property
    def status(self) -> Status:
        return self._status

    @status.setter
    def status(self, value: Status):
        self._status = Status(value)

    @property
    def power_consumption(self) -> float:
        return self._power_consumption

    @power_consumption.setter
    def power_consumption(self, value):
        self._power_consumption = clamp(float(value), 0.0)

    @property
    def execution_time(self) -> int:
        return self._execution_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self._task_id,
            "kind": type(self).__name__,
            "priority": self._priority,
            "memory_size": self._memory_size,
            "status": self._status.value,
            "power_consumption": self._power_consumption,
            "execution_time": self._execution_time,
        }

    def __repr__(self):
        return (f"{type(self).__name__}(task_id={self._task_id!r}, "
                f"status={self._status.value}, execution_time={self._execution_time})")
