"""Reconciliation engine: section diffing and non-destructive rewriting."""

from boardsync.engine.default_content import (
    COMMON_RULES,
    DEFAULT_CONTENT_RULES,
    EISENHOWER_RULES,
    FALLBACK_RULE,
    ContentRule,
    DefaultContentRules,
)
from boardsync.engine.reconciler import SectionReconciler

__all__ = [
    "COMMON_RULES",
    "DEFAULT_CONTENT_RULES",
    "EISENHOWER_RULES",
    "FALLBACK_RULE",
    "ContentRule",
    "DefaultContentRules",
    "SectionReconciler",
]
