"""
Frontends that draw the Factor Bugs engine.
"""
