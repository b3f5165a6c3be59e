"""
Core utilities that are used by multiple other modules in edid_tools.

:author: Doug Skrypa
"""
