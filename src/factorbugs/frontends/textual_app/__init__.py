"""
Textual TUI frontend.
"""
