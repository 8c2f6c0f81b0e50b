from enum import StrEnum


class ParticipantRole(StrEnum):
    VENDOR = 'vendor'
    CUSTOMER = 'customer'
