"""Congregation members, their weekly behavior and the roster tick."""
