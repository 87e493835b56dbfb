"""Timekeeper package.

Organized by feature modules (schedules, attendance, leaves, overtime, sweep, ...)
with a thin Flask controller layer over service/repository layers.
"""
