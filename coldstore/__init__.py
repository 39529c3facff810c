# =============================================================================
# coldstore
# Code42 cold storage purge-date and device/user report tools
# =============================================================================
"""
Tools that read the Code42 REST API and, for cold storage, change archive
purge dates.

Pipeline stages:
- dump:   reads (destinations, paged collections, devices, users)
- plan:   archive selection
- apply:  purge date changes
- report: audit rows and CSV reports
"""

__version__ = "1.1.0"
