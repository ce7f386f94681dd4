#!/usr/bin/env python3
## vi: tabstop=4 shiftwidth=4 softtabstop=4 expandtab
## ---------------------------------------------------------------------
##
## Copyright (C) 2024 by the onvci authors
##
## This file is part of onvci.
##
## onvci is free software: you can redistribute it and/or modify
## it under the terms of the GNU General Public License as published
## by the Free Software Foundation, either version 3 of the License, or
## (at your option) any later version.
##
## onvci is distributed in the hope that it will be useful,
## but WITHOUT ANY WARRANTY; without even the implied warranty of
## MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
## GNU General Public License for more details.
##
## You should have received a copy of the GNU General Public License
## along with onvci. If not, see <http://www.gnu.org/licenses/>.
##
## ---------------------------------------------------------------------
import sys
import time
import numpy as np

from contextlib import contextmanager


def strtime_short(span):
    """
    Return a 5-character string identifying the timespan
    """
    if span < 1:
        return "{:3d}ms".format(int(span * 1000))
    if span < 60:
        return "{:4.1f}s".format(span)
    if span < 120:
        return "{:4d}s".format(int(span))
    if span < 3600:
        return "{:4.1f}m".format(span / 60)
    return "{:4.1f}h".format(span / 3600)


def strtime(span):
    """
    Return a moderately long string, providing a human-interpretable
    representation of the provided timespan
    """
    if span < 1:
        return "{:6.3f}ms".format(span * 1000)
    if span < 120:
        full = int(span)
        return "{:3d}s {:3d}ms".format(full, int((span - full) * 1000))
    if span < 3600:
        full = int(span / 60)
        return "{:2d}m {:2d}s".format(full, int(span - full * 60))
    full = int(span / 3600)
    return "{:2d}h {:2d}m".format(full, int(span / 60 - full * 60))


class Timer:
    """
    Collect the time intervals spent in named tasks, e.g. the
    construction of a sparse Hamiltonian or the projection step
    of an eigensolver.
    """
    def __init__(self):
        self.time_construction = time.perf_counter()
        self.raw_data = {}  # Task -> list of intervals [start, end]
        self.start_times = {}

    def stop(self, task, now=None):
        """Stop a task and return runtime of it."""
        if now is None:
            now = time.perf_counter()
        if task not in self.start_times:
            return 0
        start = self.start_times.pop(task)
        self.raw_data.setdefault(task, []).append((start, now))
        return now - start

    def restart(self, task):
        """
        Start a task if it is currently not running
        or stop and restart otherwise.
        """
        now = time.perf_counter()
        if self.is_running(task):
            self.stop(task, now)
        self.start_times[task] = now

    @contextmanager
    def record(self, task):
        """
        Context manager to automatically start and stop a time
        recording as long as context is active.

        Parameters
        ----------
        task : str
            The string describing the task
        """
        self.restart(task)
        try:
            yield self
        finally:
            self.stop(task)

    def is_running(self, task):
        return task in self.start_times

    @property
    def tasks(self):
        """The list of all tasks known to this object"""
        return sorted(set(self.start_times) | set(self.raw_data))

    @property
    def lifetime(self):
        """Get total time since this class has been constructed"""
        return time.perf_counter() - self.time_construction

    def intervals(self, task):
        """Get all time intervals recorded for a particular task"""
        if task not in self.raw_data and task not in self.start_times:
            raise ValueError("Unknown task: " + task)
        intervals = [end - start for start, end in self.raw_data.get(task, [])]
        if task in self.start_times:
            intervals.append(time.perf_counter() - self.start_times[task])
        return np.array(intervals)

    def total(self, task):
        """Get total runtime on a task in seconds"""
        return np.sum(self.intervals(task))

    def current(self, task):
        """Get current time on a task without stopping it"""
        if not self.is_running(task):
            raise ValueError("Task not currently running: " + task)
        return time.perf_counter() - self.start_times[task]

    def describe(self):
        text = "Timer " + strtime_short(self.lifetime) + " lifetime:\n"
        if not self.tasks:
            return text
        maxlen = max(len(key) for key in self.tasks)
        fmt = "  {:<" + str(maxlen) + "s} {:>20s}\n"
        for key in self.tasks:
            text += fmt.format(key, strtime(self.total(key)))
        return text

    def _repr_pretty_(self, pp, cycle):
        if cycle:
            pp.text("Timer()")
        else:
            pp.text(self.describe())


Timer.start = Timer.restart


def timed_member_call(timer="timer"):
    """
    Decorator to automatically time calls to instance member functions.
    The name of the instance attribute where timings are stored is the
    timer argument to this function.
    """
    def decorator(f):
        def wrapped(self, *args, **kwargs):
            if not hasattr(self, timer):
                setattr(self, timer, Timer())
            with getattr(self, timer).record(f.__name__):
                return f(self, *args, **kwargs)
        wrapped.__doc__ = f.__doc__
        return wrapped
    return decorator


def print_timings(timer, file=sys.stdout):
    """Print the description of a timer to a file-like object."""
    print(timer.describe(), file=file, end="")
