"""
Student Applications Module

Handles the student application intake workflow:
1. Validation of the submitted form data (all errors collected)
2. Duplicate detection on first name, last name, date of birth, parent email
3. Persistence with priority calculation and an audit trail
4. Best-effort confirmation email, admin notification, and follow-up tasks

Operations:
- ApplicationPipeline.submit - Submit a new application
- ApplicationPipeline.get_status - Application record and audit history
- ApplicationPipeline.update_status - Admin status change with note
- ApplicationPipeline.list_applications - All applications in store order
"""

from .service import ApplicationPipeline, create_pipeline

__all__ = ["ApplicationPipeline", "create_pipeline"]
