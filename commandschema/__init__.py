"""Command Schema Extractor: turns component command declarations into codegen IR."""

__version__ = "0.1.0"
