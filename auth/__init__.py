"""
auth — User authentication module.

Provides:
  • Signed token creation & verification
  • Password hashing (bcrypt)
  • Signup / Login / Me API routes
  • ``get_current_user`` and ``require_admin`` FastAPI dependencies
"""
