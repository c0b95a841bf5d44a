"""
Shared kernel for the Fintrack billing apps.

Domain base classes, the error taxonomy, the unit of work and message bus,
and the infrastructure pieces (metrics, business events, row locking) that
``apps.payments`` and ``apps.subscriptions`` both build on.
"""
