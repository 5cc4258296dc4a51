"""
Configuration for the Cards Against Humanity server.
"""
