"""
SQL Auditing Manager: command-line management of SQL database auditing policies.

This package resolves user-supplied event type selections (including the
``All`` and ``None`` shorthands) into a database auditing policy model and
hands the result to a policy store.
"""

__version__ = "1.0.0"
__author__ = "Tyler Zervas"
__email__ = "tz-dev@vectorweight.com"
