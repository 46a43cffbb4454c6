"""Test package for the math bomb quiz.

This package contains unit tests for the deterministic core (questions,
timers, scoring, countdown bar, results, session) and headless runs of the
terminal event loop.  The loop tests drive a scripted fake terminal against a
fake clock, so no real tty is needed.  To run these tests, execute ``pytest``
from the project root.
"""
