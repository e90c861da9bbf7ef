"""
Command-line frontend for Factor Bugs.
"""
