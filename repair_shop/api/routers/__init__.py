from . import data, health, labels, links, reports, settings, tickets

__all__ = ["data", "health", "labels", "links", "reports", "settings", "tickets"]
