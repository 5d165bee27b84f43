from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional

from .metrics import average_metrics, compute_system_metrics
from .models import Process, ProcessRecord, ProcessState, ScheduleResult, ScheduledSlice
from .timeline import sort_by_arrival

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 2


def _finalize(result: ScheduleResult) -> ScheduleResult:
    result.averages = average_metrics(result.processes)
    compute_system_metrics(result)
    logger.debug(
        "%s: %d processes, makespan %d",
        result.algorithm,
        len(result.processes),
        result.system.makespan,
    )
    return result


def schedule_fcfs(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    First-Come First-Serve (non-preemptive) scheduling.
    """
    records = [ProcessRecord.from_process(p) for p in sort_by_arrival(processes)]

    time = 0
    timeline: List[ScheduledSlice] = []

    for r in records:
        # An idle CPU just waits for the next arrival.
        time = r.dispatch(time)
        end_time = time + r.burst_time

        timeline.append(ScheduledSlice(pid=r.pid, start_time=time, end_time=end_time))
        r.finish(end_time)

        time = end_time

    result = ScheduleResult(algorithm="FCFS", quantum=None, processes=records, timeline=timeline)
    return _finalize(result)


def schedule_sjf(processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time.
    """
    records = [ProcessRecord.from_process(p) for p in processes]

    time = 0
    timeline: List[ScheduledSlice] = []
    completed: List[ProcessRecord] = []

    while len(completed) < len(records):
        ready = [r for r in records if r.arrival_time <= time and not r.finished]

        if not ready:
            # Nothing has arrived yet: idle until the next arrival.
            time = min(r.arrival_time for r in records if not r.finished)
            continue

        # Tie-breaker: earlier arrival, then input order (min keeps the first).
        r = min(ready, key=lambda x: (x.burst_time, x.arrival_time))

        time = r.dispatch(time)
        end_time = time + r.burst_time

        timeline.append(ScheduledSlice(pid=r.pid, start_time=time, end_time=end_time))
        r.finish(end_time)
        completed.append(r)

        time = end_time

    result = ScheduleResult(algorithm="SJF", quantum=None, processes=completed, timeline=timeline)
    return _finalize(result)


def schedule_rr(processes: List[Process], quantum: Optional[int] = DEFAULT_QUANTUM) -> ScheduleResult:
    """
    Round Robin scheduling with a fixed time quantum.

    The ready queue holds indexes into the arrival-sorted records and starts
    with the earliest arrival only. After every slice, processes that have
    arrived by the new clock are queued ahead of the preempted one.
    """
    if quantum is None or quantum <= 0:
        raise ValueError("Round Robin requires a positive quantum (use --quantum)")

    records = [ProcessRecord.from_process(p) for p in sort_by_arrival(processes)]
    timeline: List[ScheduledSlice] = []

    if not records:
        return _finalize(ScheduleResult(algorithm="RR", quantum=quantum))

    time = 0
    ready: Deque[int] = deque([0])
    records[0].state = ProcessState.READY
    finished_count = 0

    while finished_count < len(records):
        index = ready.popleft()
        current = records[index]

        time = current.dispatch(time)

        run_time = min(quantum, current.remaining_burst_time)
        timeline.append(ScheduledSlice(pid=current.pid, start_time=time, end_time=time + run_time))
        time += run_time

        if current.remaining_burst_time > quantum:
            current.remaining_burst_time -= quantum
        else:
            current.finish(time)
            finished_count += 1

        # Arrivals during the slice never preempt it; they join the queue now.
        for i, r in enumerate(records):
            if r.state is ProcessState.PENDING and r.arrival_time <= time:
                r.state = ProcessState.READY
                ready.append(i)

        if not current.finished:
            current.state = ProcessState.READY
            ready.append(index)

        if not ready:
            # CPU would go idle: queue the next unfinished process; dispatch()
            # moves the clock up to its arrival. Index 0 is seeded at start
            # and so is never the one left pending here.
            for i in range(1, len(records)):
                if not records[i].finished:
                    records[i].state = ProcessState.READY
                    ready.append(i)
                    break

    result = ScheduleResult(algorithm="RR", quantum=quantum, processes=records, timeline=timeline)
    return _finalize(result)


ALGORITHMS = {
    "fcfs": schedule_fcfs,
    "sjf": schedule_sjf,
    "rr": schedule_rr,
}


def run_algorithm(name: str, processes: List[Process], quantum: Optional[int] = None) -> ScheduleResult:
    """
    Dispatch to the requested algorithm. Quantum is only used by round-robin.
    """
    name = name.lower()
    if name not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm '{name}'")

    func = ALGORITHMS[name]
    if name == "rr":
        return func(list(processes), quantum=DEFAULT_QUANTUM if quantum is None else quantum)
    return func(list(processes))


def run_all(processes: List[Process], quantum: int = DEFAULT_QUANTUM) -> List[ScheduleResult]:
    """
    Run every discipline, in report order, each over its own copy of the list.
    """
    return [run_algorithm(name, processes, quantum=quantum) for name in ALGORITHMS]
