"""Equity Edge Simulator

Rent-to-ownership simulation: how much of a property a tenant accrues for a
given owner edge, and which edge meets the owner's target yield while
transferring the most ownership to the tenant.
"""

__version__ = "0.1.0"
