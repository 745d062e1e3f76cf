"""
Clinic Application Layer

Use cases, ports and DTOs of the encounter workflow.
"""
