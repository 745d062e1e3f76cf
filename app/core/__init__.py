"""
Core building blocks: domain base classes, dependency container and application wiring.
"""
