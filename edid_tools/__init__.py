"""
Tools for decoding EDID (Extended Display Identification Data) and inspecting connected displays.

:author: Doug Skrypa
"""
