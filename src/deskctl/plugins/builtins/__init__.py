"""Plugins shipped with deskctl and registered by the workspace."""
