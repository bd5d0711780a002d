"""
Repair Shop Manager

Service tickets, reports, Telegram notifications and thermal labels
for an electronics repair shop.
"""

__version__ = "0.1.0"
