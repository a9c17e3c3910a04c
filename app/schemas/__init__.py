"""
Pydantic schema package.

Domain-specific schema modules live here, e.g.:
- applications.py
"""
