"""Status codes, stages and operators shared with the host platform."""

from enum import IntEnum, StrEnum


class PipelineStage(IntEnum):
    """Phase of the host's event pipeline a plugin is registered in.

    MAIN_OPERATION is reserved for the platform's internal handlers.
    """

    PRE_VALIDATION = 10
    PRE_OPERATION = 20
    MAIN_OPERATION = 30
    POST_OPERATION = 40


# Stage value the context dump skips unless explicitly included
INTERNAL_STAGE = PipelineStage.MAIN_OPERATION


class ExecutionMode(IntEnum):
    """Whether the plugin runs inside or after the triggering transaction."""

    SYNCHRONOUS = 0
    ASYNCHRONOUS = 1


class ConditionOperator(StrEnum):
    """Comparison operators used in query conditions."""

    EQUAL = "eq"
    NOT_EQUAL = "ne"
    GREATER_THAN = "gt"
    LESS_THAN = "lt"
    NULL = "null"
    NOT_NULL = "not-null"
    IN = "in"
    LIKE = "like"
