"""
Clinic Domain

Treatment encounters and provider slot availability.
"""
