# app/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- context: Service context built at startup and injected into handlers
- db: Database configuration and connection management
- errors: Domain exceptions and their HTTP status codes
- security: Password hashing and session tokens
"""
