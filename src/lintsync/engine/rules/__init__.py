# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Built-in rule registry."""

from lintsync.engine.rule import Rule
from lintsync.engine.rules.metrics import (
    ComplexityRule,
    MaxDepthRule,
    MaxParamsRule,
    MaxStatementsRule,
)
from lintsync.engine.rules.practices import (
    DefaultCaseLastRule,
    DefaultCaseRule,
    EqeqeqRule,
    InitDeclarationsRule,
    NoConsoleRule,
    NoDebuggerRule,
    NoUnusedVarsRule,
    NoVarRule,
)
from lintsync.engine.rules.style import (
    CamelcaseRule,
    MaxLenRule,
    PaddingLineBetweenStatementsRule,
    QuotesRule,
)

BUILTIN_RULES: dict[str, type[Rule]] = {
    "camelcase": CamelcaseRule,
    "complexity": ComplexityRule,
    "default-case": DefaultCaseRule,
    "default-case-last": DefaultCaseLastRule,
    "eqeqeq": EqeqeqRule,
    "init-declarations": InitDeclarationsRule,
    "max-depth": MaxDepthRule,
    "max-len": MaxLenRule,
    "max-params": MaxParamsRule,
    "max-statements": MaxStatementsRule,
    "no-console": NoConsoleRule,
    "no-debugger": NoDebuggerRule,
    "no-unused-vars": NoUnusedVarsRule,
    "no-var": NoVarRule,
    "padding-line-between-statements": PaddingLineBetweenStatementsRule,
    "quotes": QuotesRule,
}

__all__ = ["BUILTIN_RULES"]
