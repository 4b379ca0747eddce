import enum


class ContextLevel(enum.IntEnum):
    SYSTEM = 10
    TENANT = 12
    USER = 30
    COURSECAT = 40
    COURSE = 50
    MODULE = 70
    BLOCK = 80
