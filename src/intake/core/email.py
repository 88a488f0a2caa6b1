"""
Email Rendering

Builds the HTML bodies for the emails sent during the application intake
flow. Delivery is simulated by the notifier, so this module only renders.
"""

from datetime import date
from html import escape


def render_application_confirmation(
    school_name: str,
    parent_name: str,
    student_name: str,
    application_id: str,
    grade: str,
    submitted_on: date,
    admissions_email: str,
) -> str:
    """Render the confirmation email sent to the parent after submission."""
    # Escape user inputs to prevent XSS
    safe_school_name = escape(school_name)
    safe_parent_name = escape(parent_name)
    safe_student_name = escape(student_name)
    safe_grade = escape(grade)
    safe_application_id = escape(application_id)

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <style>
            body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
            .header {{ color: #1a365d; margin-bottom: 24px; }}
            .info-box {{ background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin: 20px 0; }}
            .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
        </style>
    </head>
    <body>
        <div class="container">
            <h1 class="header">{safe_school_name} - Application Received</h1>

            <p>Dear {safe_parent_name},</p>

            <p>Thank you for submitting an application for <strong>{safe_student_name}</strong>.</p>

            <div class="info-box">
                <h3>Application Details:</h3>
                <p><strong>Application ID:</strong> {safe_application_id}</p>
                <p><strong>Student Name:</strong> {safe_student_name}</p>
                <p><strong>Grade Applied:</strong> {safe_grade}</p>
                <p><strong>Submission Date:</strong> {submitted_on.isoformat()}</p>
            </div>

            <h3>Next Steps:</h3>
            <ol>
                <li>Our admissions team will review your application within 2-3 business days</li>
                <li>You will receive an email with the admission decision</li>
                <li>If accepted, enrollment instructions will be provided</li>
            </ol>

            <div class="footer">
                <p>If you have any questions, please contact us at {escape(admissions_email)}</p>
                <p>Best regards,<br>{safe_school_name} Admissions Team</p>
            </div>
        </div>
    </body>
    </html>
    """


def application_confirmation_subject(student_name: str) -> str:
    return f"Application Confirmation - {student_name}"
