from enum import StrEnum


class RunnerState(StrEnum):
    CREATED = 'created'
    RUNNING = 'running'
    STOPPING = 'stopping'
    STOPPED = 'stopped'  # stopped from outside (deactivation, shutdown)
    COMPLETED = 'completed'  # lifetime cap reached
