# Scheduler: publication cycle and the weekly scheduling service
from .cycle import CycleResult, PublicationCycle
from .service import PublicationScheduler, next_run_time

__all__ = [
    "CycleResult",
    "PublicationCycle",
    "PublicationScheduler",
    "next_run_time",
]
