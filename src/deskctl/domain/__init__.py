"""Domain layer: pure models and algorithms.

No I/O, no configuration lookup, no logging side effects beyond debug
traces. Services wire these pieces to the workspace.
"""
