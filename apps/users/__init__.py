"""Users app package.

Defines the email-login user model used as AUTH_USER_MODEL and the
registration endpoint. Billing code never touches the model directly;
it goes through ``apps.users.repositories``.
"""
