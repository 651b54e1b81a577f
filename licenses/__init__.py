"""
Licenses module - License records and the validation state machine.

This module handles:
- License record entity and HWID binding rules
- License key generation
- Validate/register decisions
- Admin lifecycle (generate, bulk generate, reset HWID, delete)
"""
