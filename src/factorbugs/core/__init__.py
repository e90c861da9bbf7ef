"""
Core factor analysis, answer checking, and session state for Factor Bugs.
"""

from factorbugs.core.analyzer import analyze
from factorbugs.core.engine import FactorBugsEngine
from factorbugs.core.models import AnswerSlots, CorrectnessResult, FactorStructure, Progress, Session
from factorbugs.core.types import BuildAction, GameMode, Mark, NumberType, Response, ResponseType, SlotKind
from factorbugs.core.validation import check_shape, validate_answers

__all__ = [
    "AnswerSlots",
    "BuildAction",
    "CorrectnessResult",
    "FactorBugsEngine",
    "FactorStructure",
    "GameMode",
    "Mark",
    "NumberType",
    "Progress",
    "Response",
    "ResponseType",
    "Session",
    "SlotKind",
    "analyze",
    "check_shape",
    "validate_answers",
]
