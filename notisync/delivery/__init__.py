"""Notification presenters and the action sink."""
