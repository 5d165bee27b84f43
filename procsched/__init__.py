"""
procsched package.

Simulates FCFS, non-preemptive SJF and Round-Robin CPU scheduling over a
static set of processes and reports average turnaround, response and wait
time for each discipline.
"""

__all__ = ["cli"]
