"""
Shared helpers for certificate numbers and date formatting
"""
