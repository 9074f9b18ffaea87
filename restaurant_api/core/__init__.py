"""
Core infrastructure: database, document store, errors and security.
"""
