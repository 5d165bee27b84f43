from __future__ import annotations

import argparse
import logging

from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .algorithms import DEFAULT_QUANTUM, run_all
from .gantt import build_rich_gantt
from .metrics import format_average, format_metrics_line
from .models import ScheduleResult
from .workload_io import WorkloadError, load_workload

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError("quantum must be a positive integer")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procsched",
        description="Average turnaround, response and wait time under FCFS, SJF and RR scheduling.",
    )
    parser.add_argument(
        "workload",
        nargs="?",
        help="Processes file: '<arrival> <burst>' per line, or a .json / .csv workload.",
    )
    parser.add_argument(
        "--quantum",
        "-q",
        type=_positive_int,
        default=DEFAULT_QUANTUM,
        help=f"Time quantum for round-robin (default: {DEFAULT_QUANTUM}).",
    )
    parser.add_argument(
        "--decimal-separator",
        default=".",
        help="Decimal separator used when printing averages (default: '.').",
    )
    parser.add_argument(
        "--details",
        action="store_true",
        help="Also print per-process and system metrics tables for each algorithm.",
    )
    parser.add_argument(
        "--gantt",
        action="store_true",
        help="Also print a Gantt chart for each algorithm.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log verbosity (-v info, -vv debug).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors.",
    )
    return parser


def configure_logging(verbose: int = 0, quiet: bool = False) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    package_logger = logging.getLogger("procsched")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(
            RichHandler(console=Console(stderr=True), show_time=False, show_path=False)
        )


def _print_result(result: ScheduleResult, console: Console, decimal_separator: str) -> None:
    headers = [
        "PID",
        "Arrive",
        "Burst",
        "Start",
        "Complete",
        "Wait",
        "Turnaround",
        "Response",
    ]

    title = result.algorithm if result.quantum is None else f"{result.algorithm} (quantum {result.quantum})"
    proc_table = Table(title=f"{title}: per-process metrics", box=box.SIMPLE_HEAVY)
    for h in headers:
        proc_table.add_column(h, justify="center" if h == "PID" else "right")

    for r in sorted(result.processes, key=lambda r: (r.arrival_time, r.pid)):
        proc_table.add_row(
            r.pid,
            str(r.arrival_time),
            str(r.burst_time),
            str(r.start_time),
            str(r.completion_time),
            str(r.wait_time),
            str(r.turnaround_time),
            str(r.response_time),
        )

    console.print(proc_table)

    if result.system:
        sys = result.system
        sys_table = Table(title=f"{title}: system metrics", box=box.SIMPLE_HEAVY)
        sys_table.add_column("Metric")
        sys_table.add_column("Value", justify="right")

        sys_table.add_row("Avg turnaround", format_average(result.averages.turnaround, decimal_separator))
        sys_table.add_row("Avg response", format_average(result.averages.response, decimal_separator))
        sys_table.add_row("Avg wait", format_average(result.averages.wait, decimal_separator))
        sys_table.add_row("Makespan", str(sys.makespan))
        sys_table.add_row("CPU busy time", str(sys.cpu_busy_time))
        sys_table.add_row("Throughput (proc/time)", f"{sys.throughput:.3f}")
        sys_table.add_row("CPU utilization", f"{sys.cpu_utilization*100:.1f}%")

        console.print(sys_table)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(args.verbose, args.quiet)

    console = Console(highlight=False)
    err_console = Console(stderr=True, highlight=False)

    if args.workload is None:
        console.print(parser.format_usage().rstrip(), markup=False, soft_wrap=True)
        return 0

    try:
        processes = load_workload(args.workload)
    except WorkloadError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]", soft_wrap=True)
        return 1

    if not processes:
        console.print("No process to schedule.")
        return 0

    logger.info("Loaded %d processes from %s", len(processes), args.workload)

    for result in run_all(processes, quantum=args.quantum):
        console.print(
            format_metrics_line(result.algorithm, result.averages, args.decimal_separator),
            markup=False,
            soft_wrap=True,
        )
        if args.gantt:
            panel, time_marks = build_rich_gantt(result.timeline, title=f"{result.algorithm} Gantt Chart")
            console.print(panel)
            if time_marks:
                console.print(time_marks)
        if args.details:
            _print_result(result, console, args.decimal_separator)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
