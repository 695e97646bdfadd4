#!/usr/bin/env python3
"""
PROVIDERCTL VARIABLES - Placeholder Resolution
----------------------------------------------
Finds ${ NAME } placeholders in raw manifest text and replaces them with
values from a VariableSource. Substitution is all-or-nothing: if one value
is missing, every missing name is reported and the text is left alone.

Author: ProviderCtl Team
Date: 2026-10-17
"""

import re
from typing import List, Sequence

from providerctl.core.config import VariableSource
from providerctl.core.errors import MissingVariablesError

# Group 1: variable name (a leading digit is allowed); surrounding whitespace is tolerated
VARIABLE_PATTERN = re.compile(r'\$\{\s*([A-Za-z0-9_][A-Za-z0-9_\-\.]*)\s*\}')


def inspect_variables(text: str) -> List[str]:
    """Distinct variable names in order of first appearance."""
    seen = []
    for match in VARIABLE_PATTERN.finditer(text):
        name = match.group(1)
        if name not in seen:
            seen.append(name)
    return seen


def _pattern_for(name: str) -> "re.Pattern":
    return re.compile(r'\$\{\s*' + re.escape(name) + r'\s*\}')


def replace_variables(text: str, names: Sequence[str], source: VariableSource) -> str:
    values = {}
    missing = []
    for name in names:
        value, found = source.get(name)
        if not found:
            missing.append(name)
            continue
        values[name] = value

    if missing:
        raise MissingVariablesError(missing)

    for name, value in values.items():
        # Function replacement so backslashes in values are taken literally
        text = _pattern_for(name).sub(lambda _: value, text)
    return text
