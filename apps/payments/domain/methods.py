"""Mapping of gateway payment types onto PaymentMethod."""

from typing import Optional

from apps.payments.domain.entities import PaymentMethod

PAYMENT_TYPE_TO_METHOD = {
    'credit_card': PaymentMethod.CREDIT_CARD,
    'bank_transfer': PaymentMethod.BANK_TRANSFER,
    'echannel': PaymentMethod.BANK_TRANSFER,
    'gopay': PaymentMethod.EWALLET,
    'shopeepay': PaymentMethod.EWALLET,
    'qris': PaymentMethod.EWALLET,
    'cstore': PaymentMethod.CONVENIENCE_STORE,
    'kredivo': PaymentMethod.KREDIVO,
    'akulaku': PaymentMethod.AKULAKU,
}


def map_payment_method(payment_type: Optional[str]) -> PaymentMethod:
    """Unknown or missing types become OTHER instead of failing the webhook"""
    if not payment_type:
        return PaymentMethod.OTHER
    return PAYMENT_TYPE_TO_METHOD.get(payment_type.strip().lower(), PaymentMethod.OTHER)
