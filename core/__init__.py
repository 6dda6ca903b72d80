"""
Core services for Galat Search: configuration, errors and logging.
"""
