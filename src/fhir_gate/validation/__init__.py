"""
Validation stage: parse, validate, classify.

- parser.py: raw bytes -> ParsedResource (hard fail: ParseError)
- classifier.py: issues -> Outcome (the single pass/fail rule)
- stage.py: ValidationStage orchestrating the three steps
"""

from .classifier import classify
from .parser import MISSING_RESOURCE_TYPE, ResourceParser
from .stage import ValidationStage

__all__ = [
    "ValidationStage",
    "ResourceParser",
    "classify",
    "MISSING_RESOURCE_TYPE",
]
