"""
Group Gift Service

Pooled gift contributions for the isA platform.

Features:
- Group gift campaigns toward a shared gift for one recipient
- Contribution ledger with duplicate and overfunding protection
- Pending invitation tracking
- Campaign progress summaries and cross-campaign statistics
- Notification intents for campaign lifecycle events
"""

__version__ = "1.0.0"
