"""specwrap — before/after hook wrapper for test framework functions.

Runs framework-agnostic *before* and *after* hooks around a single test
or hook body, regardless of whether that body is a coroutine function or
a plain blocking callable, and folds every failure source into one
error value.
"""

from specwrap.core.wrapper import TestFrameworkFnWrapper, test_fn_wrapper

__version__ = "1.0.0"

__all__ = ["TestFrameworkFnWrapper", "__version__", "test_fn_wrapper"]
