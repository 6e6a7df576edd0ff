"""
Utility subpackage for llmkit.

Holds the HTTP session factory and the JSON helpers used by the
providers to decode multi-document response bodies.
"""
