"""
Content Manager

A command-line tool that checks files out of a GitHub repository, applies
simple edits, and checks them back in guarded by the file's blob SHA.
"""

__version__ = "1.0.0"
__author__ = "Content Manager Team"
__description__ = "Checkout, update, and checkin files in GitHub-hosted sites"
