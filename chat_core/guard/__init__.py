from .rules import GuardRules
from .validator import InputGuard

__all__ = ["GuardRules", "InputGuard"]
