"""
lift-analytics: workout analytics and goal forecasting.

The pure engine lives in ``lift_analytics.core``; ``lift_analytics.io`` holds
the JSONL log snapshot store and ``lift_analytics.cli`` the terminal interface.
"""

__version__ = "0.1.0"
