"""Payments app: Midtrans Snap payments for the premium subscription.

Creating a payment opens a hosted Snap session; the gateway later reports
the outcome to the webhook, which settles the payment and activates or
extends the user's PREMIUM subscription.
"""
