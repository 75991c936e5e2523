"""
svupdate - keeps a Paper or Purpur Minecraft server jar up to date.

This package checks a build server API for the newest build, compares it with
the version recorded in the local version_history.json, and downloads and
checksum-verifies the server jar when an update is available.
"""

__version__ = "1.0.0"
__author__ = "dunamismax"
