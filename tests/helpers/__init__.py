"""Test helper modules for microtext testing.

This package provides shared fakes:
- InMemoryCommitter: commit primitive without git
- ScriptedInterpreter: interpreter with canned proposals
- TickingClock: deterministic clock for timestamps
"""

from .fakes import InMemoryCommitter, ScriptedInterpreter, TickingClock

__all__ = [
    'InMemoryCommitter',
    'ScriptedInterpreter',
    'TickingClock',
]
