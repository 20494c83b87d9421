"""Provisioning and reconciliation of VM network interfaces."""

__version__ = "0.1.0"
