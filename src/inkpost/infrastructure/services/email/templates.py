"""Built-in email templates.

Each entry has a subject, a plain text body and an HTML body, all rendered
with Jinja2. Every template receives ``app_name`` and ``frontend_url``.
"""

_LAYOUT_START = """<!DOCTYPE html>
<html>
  <head><meta charset="utf-8"><title>{{ title }}</title></head>
  <body style="font-family: Arial, sans-serif; line-height: 1.6; background-color: #f4f4f4;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; padding: 20px; border-radius: 10px;">
"""

_LAYOUT_END = """      <p>Best regards,<br>The {{ app_name }} Team</p>
    </div>
  </body>
</html>
"""

_BUTTON = (
    '<p style="text-align: center; margin: 30px 0;">'
    '<a href="{{ url }}" style="background-color: {{ color }}; color: #ffffff; '
    'padding: 12px 30px; text-decoration: none; border-radius: 6px;">{{ label }}</a></p>\n'
    "<p>If the button doesn't work, copy and paste this link into your browser:</p>\n"
    '<p style="word-break: break-all; font-family: monospace;">{{ url }}</p>\n'
)

WELCOME = {
    "subject": "Welcome to {{ app_name }}!",
    "text": (
        "Welcome to {{ app_name }}, {{ name }}! "
        "We're excited to have you join our community.\n\n{{ frontend_url }}"
    ),
    "html": _LAYOUT_START
    + """      <h1 style="color: #2563eb;">Welcome to {{ app_name }}!</h1>
      <p>Hi {{ name }},</p>
      <p>We're thrilled to have you join our community of writers and readers.</p>
      <p><a href="{{ frontend_url }}">Start writing your first post</a></p>
"""
    + _LAYOUT_END,
}

VERIFICATION = {
    "subject": "Verify your email address",
    "text": (
        "Hi {{ name }}, please verify your email address by opening this link: {{ url }}\n\n"
        "The link expires in {{ expires_in }}."
    ),
    "html": _LAYOUT_START
    + """      <h1 style="color: #2563eb;">Verify Your Email Address</h1>
      <p>Hi {{ name }},</p>
      <p>Thank you for signing up for {{ app_name }}! Please verify your email address to complete your registration.</p>
"""
    + _BUTTON.replace("{{ color }}", "#16a34a").replace("{{ label }}", "Verify Email Address")
    + """      <p>This verification link will expire in {{ expires_in }}.</p>
      <p>If you didn't create an account with {{ app_name }}, you can safely ignore this email.</p>
"""
    + _LAYOUT_END,
}

PASSWORD_RESET = {
    "subject": "Reset your password",
    "text": (
        "Hi {{ name }}, you requested a password reset. "
        "Open this link to reset your password: {{ url }}\n\n"
        "The link expires in {{ expires_in }}. If you didn't request it, ignore this email."
    ),
    "html": _LAYOUT_START
    + """      <h1 style="color: #dc2626;">Reset Your Password</h1>
      <p>Hi {{ name }},</p>
      <p>We received a request to reset the password of your {{ app_name }} account.</p>
"""
    + _BUTTON.replace("{{ color }}", "#dc2626").replace("{{ label }}", "Reset Password")
    + """      <p><strong>Important:</strong> this link will expire in {{ expires_in }}.</p>
      <p>If you didn't request a password reset, you can safely ignore this email. Your password will remain unchanged.</p>
"""
    + _LAYOUT_END,
}

PASSWORD_CHANGED = {
    "subject": "Password Changed Successfully",
    "text": (
        "Hi {{ name }}, your password has been changed successfully at {{ changed_at }}. "
        "If you did not make this change, contact support: {{ frontend_url }}/support"
    ),
    "html": _LAYOUT_START
    + """      <h1 style="color: #16a34a;">Password Changed Successfully</h1>
      <p>Hi {{ name }},</p>
      <p>This is a confirmation that the password of your {{ app_name }} account has been changed.</p>
      <p><strong>Time:</strong> {{ changed_at }}</p>
      <p>If you did NOT change your password, please <a href="{{ frontend_url }}/support">contact our support team</a> immediately.</p>
      <p>All other sessions have been signed out.</p>
"""
    + _LAYOUT_END,
}
