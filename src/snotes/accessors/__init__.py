"""Handles parsing and writing individual files.

:class:`snotes.accessors.base.Accessor` defines an API, and
:class:`snotes.accessors.delegating.DelegatingAccessor` picks the right implementation for a path.
"""
