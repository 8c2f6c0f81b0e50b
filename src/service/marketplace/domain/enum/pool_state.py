from enum import StrEnum


class PoolState(StrEnum):
    UNCONFIGURED = 'unconfigured'
    CONFIGURED = 'configured'
    SHUT_DOWN = 'shut_down'
