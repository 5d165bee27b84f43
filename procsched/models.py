from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


@dataclass(frozen=True)
class Process:
    pid: str
    arrival_time: int
    burst_time: int


class ProcessState(Enum):
    PENDING = "pending"
    READY = "ready"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass
class ProcessRecord:
    """
    Mutable per-run copy of a process. Each engine builds its own records and
    fills in the timing fields as its simulated clock advances.
    """

    pid: str
    arrival_time: int
    burst_time: int
    remaining_burst_time: int = 0
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    turnaround_time: int = 0
    response_time: int = 0
    wait_time: int = 0
    state: ProcessState = ProcessState.PENDING

    @classmethod
    def from_process(cls, process: Process) -> "ProcessRecord":
        return cls(
            pid=process.pid,
            arrival_time=process.arrival_time,
            burst_time=process.burst_time,
            remaining_burst_time=process.burst_time,
        )

    @property
    def finished(self) -> bool:
        return self.state is ProcessState.FINISHED

    def dispatch(self, clock: int) -> int:
        """
        Put the record on the CPU. The first dispatch fixes start_time (never
        earlier than the arrival) and the possibly advanced clock is returned.
        """
        if self.start_time is None:
            self.start_time = max(clock, self.arrival_time)
            clock = self.start_time
        self.state = ProcessState.RUNNING
        return clock

    def finish(self, completion_time: int) -> None:
        self.completion_time = completion_time
        self.remaining_burst_time = 0
        self.turnaround_time = completion_time - self.arrival_time
        self.response_time = self.start_time - self.arrival_time
        self.wait_time = self.turnaround_time - self.burst_time
        self.state = ProcessState.FINISHED


@dataclass
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: int
    end_time: int


@dataclass
class AverageMetrics:
    turnaround: float = 0.0
    response: float = 0.0
    wait: float = 0.0


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class ScheduleResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessRecord] = field(default_factory=list)
    timeline: List[ScheduledSlice] = field(default_factory=list)
    averages: AverageMetrics = field(default_factory=AverageMetrics)
    system: Optional[SystemMetrics] = None
