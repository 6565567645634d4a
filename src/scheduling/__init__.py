"""Scheduling phrase resolution.

The scheduling layer turns an English free-form phrase ("tomorrow at 3pm bangladesh time") into
concrete, future-facing instants, annotated with the timezone detected in the text.
"""
