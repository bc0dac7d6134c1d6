"""
Decorator: @admin_required — role_required restricted to ADMIN.

Used by the admin blueprint for user and role management.
"""
from decorators.role_required import role_required

admin_required = role_required("ADMIN", message="Admin access required")
