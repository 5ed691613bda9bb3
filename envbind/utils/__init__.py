"""
Generic utility functions shared across modules.

Includes lookup-source abstractions and the literal grammars (booleans,
integers, floats, durations) used by the value binder.
"""
