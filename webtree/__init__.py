# webtree/__init__.py
"""
WebTree package initializer.
Defines package version; CLI lives in `webtree.cli`.
"""
__version__ = "0.1.0"
