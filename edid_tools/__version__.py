__title__ = 'edid_tools'
__description__ = 'EDID / CTA-861 decoder and display inspection tools'
__version__ = '2026.10.17'
__author__ = 'Doug Skrypa'
