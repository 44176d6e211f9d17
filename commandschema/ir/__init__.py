"""Command IR: the language-agnostic form native-code emitters consume.

The IR sits between the declaration-level type model (what the oracle
resolves) and the native emitters. It normalizes:
- Command names and optionality
- Parameter lists, minus the leading component ref
- Parameter types, restricted to a closed set of primitive kinds
"""

SCHEMA_VERSION = "0.1.0"
