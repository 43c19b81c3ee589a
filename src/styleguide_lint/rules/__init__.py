"""
Lint rules for style-guide documents.

Built-in rules register themselves on first lookup; third-party rules
subclass Rule and decorate with ``@register_rule``.
"""

from styleguide_lint.rules.base import (
    Rule,
    Severity,
    Violation,
    get_rule,
    iter_enabled,
    list_rules,
    register_rule,
    suggest_anchor,
    unregister_rule,
)

__all__ = [
    "Rule",
    "Severity",
    "Violation",
    "get_rule",
    "iter_enabled",
    "list_rules",
    "register_rule",
    "suggest_anchor",
    "unregister_rule",
]
