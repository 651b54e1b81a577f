"""
Activity module - Append-only audit trail.

This module handles:
- Activity entries for API calls and admin actions
- Reading the most recent activity for the dashboard
"""
