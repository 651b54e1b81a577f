"""
Policies module - Global ban list and service settings.

This module handles:
- HWID ban list and its membership rules
- Service settings (API switch, device limits, expiration policy)
"""
