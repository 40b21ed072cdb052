"""
RangeGet - resumable multi-connection HTTP downloader
"""

__version__ = "1.0.0"
