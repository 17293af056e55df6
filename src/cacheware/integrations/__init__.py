"""Integrations with web frameworks.

Import submodules directly, e.g. ``cacheware.integrations.starlette``.
"""
