"""Authentication.

Users register with email/password, log in for a one-hour JWT, and present
it as ``Authorization: Bearer <token>``. Tokens are stateless: nothing is
stored server-side and expiry is the only way a token stops working.
"""
