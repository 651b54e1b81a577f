"""
GetLicenseInfoQuery.

Query for the one-line license summary shown to client software.
"""
from dataclasses import dataclass


@dataclass
class GetLicenseInfoQuery:
    """Query to summarise a license key."""

    license_key: str
