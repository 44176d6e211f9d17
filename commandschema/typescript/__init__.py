"""TypeScript declaration front end: tree-sitter parser and type oracle.

Covers the declaration subset component spec files use to describe
commands: interfaces, type aliases, type literals, function types and
imports. Statements outside that subset are skipped.
"""

from commandschema.typescript.oracle import TypeScriptOracle
from commandschema.typescript.parser import TypeScriptSyntaxError, parse_file, parse_source, parse_type

__all__ = ["TypeScriptOracle", "TypeScriptSyntaxError", "parse_file", "parse_source", "parse_type"]
