"""
Core logic package.

Runtime catalog, template parsing, and the invocation spec resolver.
"""
