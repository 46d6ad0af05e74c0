"""Completion API integration.

- Callers hand over a finished prompt and receive plain text.
- Configuration comes from `Settings` once at startup and is injected, never read globally.
- Upstream error details are for server logs; routes map them to generic responses.
"""
