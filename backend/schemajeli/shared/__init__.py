"""
Shared building blocks for catalog services
"""
