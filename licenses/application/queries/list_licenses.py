"""
License listing queries for the admin dashboard.
"""
from dataclasses import dataclass


@dataclass
class ListLicensesQuery:
    """Query to list every license, newest first."""

    pass


@dataclass
class GetDashboardStatsQuery:
    """Query for dashboard counters."""

    pass
