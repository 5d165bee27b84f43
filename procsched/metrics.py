from __future__ import annotations

from typing import List

from .models import AverageMetrics, ProcessRecord, ScheduleResult, SystemMetrics
from .timeline import busy_time


def average_metrics(records: List[ProcessRecord]) -> AverageMetrics:
    """
    Average turnaround, response and wait time over finished records.
    """
    if not records:
        return AverageMetrics()

    n = len(records)
    return AverageMetrics(
        turnaround=sum(r.turnaround_time for r in records) / n,
        response=sum(r.response_time for r in records) / n,
        wait=sum(r.wait_time for r in records) / n,
    )


def compute_system_metrics(result: ScheduleResult) -> SystemMetrics:
    """
    Compute throughput and CPU utilization given populated per-process records
    and timeline slices.
    """
    if not result.processes:
        system = SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)
        result.system = system
        return system

    makespan = max(r.completion_time for r in result.processes)
    cpu_busy_time = busy_time(result.timeline)

    throughput = len(result.processes) / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    system = SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )
    result.system = system
    return system


def format_average(value: float, decimal_separator: str = ".") -> str:
    text = f"{value:.1f}"
    if decimal_separator != ".":
        text = text.replace(".", decimal_separator)
    return text


def format_metrics_line(name: str, averages: AverageMetrics, decimal_separator: str = ".") -> str:
    """
    Render `<NAME> <avg_turnaround> <avg_response> <avg_wait>`.
    """
    values = (averages.turnaround, averages.response, averages.wait)
    return " ".join([name] + [format_average(v, decimal_separator) for v in values])
