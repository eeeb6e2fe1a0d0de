"""
app/validators package marker.
"""

from app.validators.rules_validator import RULE_ORDER, RulesValidator, validate_rules

__all__ = [
    "RULE_ORDER",
    "RulesValidator",
    "validate_rules",
]
