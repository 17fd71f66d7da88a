"""deskctl: rule-driven desktop icon organizer."""

__version__ = "0.3.0"
