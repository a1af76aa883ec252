"""
Services module - Cross-cutting capabilities

Contains:
- Scheduling of the polling loop
"""

from predictarb.services.scheduler import SchedulerService, create_scheduler_service

__all__ = [
    "SchedulerService",
    "create_scheduler_service",
]
