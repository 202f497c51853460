"""
Pulse CLI - Command-line interface for the analytics client.

Usage:
    pulse-cli send u1 open_app --screen Home --field platform
    pulse-cli --config config/analytics.yaml send u1 purchase --prop price=9.99
    pulse-cli environment
"""

__version__ = "1.0.0"
