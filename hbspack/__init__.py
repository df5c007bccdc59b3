"""hbspack - Handlebars template precompiler and module bundler.

Compiles template and partial sources into one JavaScript module per file
group, wrapped for plain scripts, namespaces, CommonJS, Node.js or AMD.
"""

__version__ = "0.1.0"

# Configure logging for library use
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Re-export main CLI entry point
from .cli import main

__all__ = ["main"]
