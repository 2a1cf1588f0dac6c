"""Contract handler classification.

A handler is a function the outside world can invoke as a program
instruction. Three independent signals identify one:

    1. Attribute: an entry-point marker such as ``#[instruction]``
    2. Naming: a ``pub`` function named like an instruction
       (``*_handler``, ``initialize*``, ``swap*``, ``validate``, ...)
    3. Signature: a parameter typed with the framework's per-invocation
       request context (``Context<T>`` in any qualification)

Every detector that needs to know whether a function is a handler should go
through is_contract_handler so that the heuristic lives in one place.
"""

from __future__ import annotations

from ..config import DEFAULT_HANDLER_RULES, HandlerRules
from ..scanning.syntax import Attribute, FunctionDecl


def is_contract_handler(fn: FunctionDecl, rules: HandlerRules = DEFAULT_HANDLER_RULES) -> bool:
    """Return True if ``fn`` is an externally invocable contract entry point."""
    return (
        has_entry_attribute(fn, rules)
        or has_handler_name(fn, rules)
        or takes_request_context(fn, rules)
    )


def has_entry_attribute(fn: FunctionDecl, rules: HandlerRules = DEFAULT_HANDLER_RULES) -> bool:
    """True if an attribute, or the sole argument of one, is an entry-point marker."""
    return any(_is_entry_attribute(attr, rules) for attr in fn.attributes)


def has_handler_name(fn: FunctionDecl, rules: HandlerRules = DEFAULT_HANDLER_RULES) -> bool:
    """True for a ``pub`` function whose name has a handler shape."""
    if not fn.is_public:
        return False
    name = fn.name
    return (
        name.endswith(rules.name_suffixes)
        or name.startswith(rules.name_prefixes)
        or name in rules.exact_names
    )


def takes_request_context(fn: FunctionDecl, rules: HandlerRules = DEFAULT_HANDLER_RULES) -> bool:
    """True if any parameter's type path has a segment starting with the context prefix."""
    prefix = rules.context_type_prefix
    return any(
        segment.startswith(prefix) for param in fn.parameters for segment in param.type_path
    )


def _is_entry_attribute(attr: Attribute, rules: HandlerRules) -> bool:
    if attr.path in rules.entry_attributes:
        return True
    if attr.arguments is not None and len(attr.arguments) == 1:
        return _leading_path(attr.arguments[0]) in rules.entry_attributes
    return False


def _leading_path(argument: str) -> str:
    """The path an attribute argument starts with (``instruction(x)`` -> ``instruction``)."""
    end = len(argument)
    for stop in ("(", "=", " "):
        index = argument.find(stop)
        if index != -1:
            end = min(end, index)
    return argument[:end]
