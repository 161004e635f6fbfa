"""SFTPGo Admin.

Client library for the SFTPGo administration REST API: user management,
quota scans and active connection monitoring.
"""

__version__ = "0.1.0"
