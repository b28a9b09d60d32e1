"""
HTTP API blueprint for the Business Card Parsing API.
"""
