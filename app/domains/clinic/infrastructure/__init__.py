"""
Clinic Infrastructure Layer

SQLAlchemy persistence and HTTP integrations.
"""
