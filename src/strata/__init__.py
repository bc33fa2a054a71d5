"""
Strata - layered document composition

Strata validates, merges and renders layered Markdown instruction documents
(prompt templates, subagent personas, shared includes) into flat, ordered
output per root document.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
