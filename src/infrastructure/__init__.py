"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- anthropic: Claude API client
- crm: GoHighLevel contacts and file upload
- pdf: PDFShift HTML-to-PDF conversion
- mail: SendGrid transactional email

These wrappers translate between external formats and our domain models.
"""
