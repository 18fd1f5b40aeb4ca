"""Keeps tagged, dated plain-text notes in a directory and finds them again.

If you installed via ``pip``, run ``snotes -h`` to get help.

To use the Python API, look at :class:`snotes.api.Snotes`
"""
