"""
Resets module - HWID reset request queue.

This module handles:
- Client-submitted HWID reset requests
- Admin approval (unbinds the license) and denial
"""
