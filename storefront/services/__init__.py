"""
Domain services shared across API areas
"""
