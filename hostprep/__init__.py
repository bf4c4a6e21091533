"""
hostprep - interactive Linux host preparation tools.

This package provides CLI tools for LVM/filesystem provisioning, SSH trust
bootstrap of an automation account, and Checkmk agent plugin deployment.
"""

__version__ = "0.1.0"
__all__ = ["cli"]
