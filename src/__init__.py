"""
PT Program Generator - AI-drafted personal training programs for club clients.

This package contains the complete application:
- core: Framework-agnostic business logic (mapping, prompts, rendering, delivery)
- infrastructure: External service integrations (Claude, CRM, PDF, email)
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
