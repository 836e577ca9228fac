"""
Email templates and delivery through the Resend API.
"""
