"""
Payment Command Handlers

These are the use cases for the payment domain.
They orchestrate domain operations within transactions.

Commands:
- CreatePaymentCommand: Open a gateway session for the premium product
- ProcessWebhookCommand: Apply one gateway notification to its payment
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4
import logging
import time

from django.db import IntegrityError

from shared.application.uow import DjangoUnitOfWork
from shared.domain.base import utcnow
from shared.domain.exceptions import ForbiddenError, NotFoundError, ValidationError
from shared.domain.value_objects import Money
from shared.infrastructure import metrics
from shared.infrastructure.business_events import log_business_event
from apps.payments.domain.entities import PaymentStatus, PaymentTransaction
from apps.payments.domain.methods import map_payment_method
from apps.payments.domain.notifications import StatusFamily, WebhookNotification
from apps.payments.domain.signature import verify_signature
from apps.payments.gateway import SnapCustomer, SnapItem, SnapRequest
from apps.subscriptions.application.command_handlers import ActivateSubscriptionCommand

logger = logging.getLogger(__name__)


def generate_order_id(user_id: Any, now: Optional[datetime] = None) -> str:
    """``ORDER-{user}-{epoch millis}-{6 hex}``; the suffix separates same-millisecond requests"""
    moment = now or utcnow()
    millis = int(moment.timestamp() * 1000)
    return f"ORDER-{str(user_id)[:8]}-{millis}-{uuid4().hex[:6]}"


@dataclass(frozen=True)
class SubscriptionProduct:
    """The single thing users can pay for"""
    product_id: str
    name: str
    price: Money


# ===== Commands =====

@dataclass
class CreatePaymentCommand:
    """
    Command to start paying for the premium subscription

    A repeated idempotency key returns the original payment untouched.
    """
    user_id: int
    idempotency_key: Optional[str] = None


@dataclass
class ProcessWebhookCommand:
    """Command to apply a parsed gateway notification"""
    notification: WebhookNotification



# ===== Results =====

@dataclass
class CreatePaymentResult:
    payment: PaymentTransaction
    created: bool


@dataclass
class WebhookResult:
    order_id: str
    outcome: str
    status: Optional[str] = None
    user_id: Optional[int] = None
    subscription_id: Optional[UUID] = None



# ===== Command Handlers =====

class CreatePaymentHandler:
    """
    Handler for CreatePayment command

    Strategy:
    1. Replay: an idempotency key seen before returns the stored payment
    2. Persist a PENDING payment and commit before talking to the gateway
    3. Open a Snap session (bounded by the client timeout)
    4. Store token and redirect URL, or mark FAILED and re-raise
    """

    def __init__(self, payment_repo, user_repo, gateway, product: SubscriptionProduct):
        self.payment_repo = payment_repo
        self.user_repo = user_repo
        self.gateway = gateway
        self.product = product

    def handle(self, command: CreatePaymentCommand) -> CreatePaymentResult:
        started = time.perf_counter()
        try:
            result = self._create(command)
        except Exception:
            metrics.PAYMENT_CREATED.labels(result="failed").inc()
            raise
        finally:
            metrics.PAYMENT_CREATION_SECONDS.observe(time.perf_counter() - started)

        metrics.PAYMENT_CREATED.labels(result="created" if result.created else "replayed").inc()
        return result

    def _create(self, command: CreatePaymentCommand) -> CreatePaymentResult:
        key = (command.idempotency_key or '').strip() or None

        existing = self._replay(key, command.user_id)
        if existing is not None:
            logger.info(f"Idempotent replay for key {key}: returning payment {existing.order_id}")
            return CreatePaymentResult(payment=existing, created=False)

        user = self.user_repo.get(command.user_id)

        payment = PaymentTransaction.create(
            order_id=generate_order_id(user.id),
            user_id=user.id,
            amount=self.product.price,
            idempotency_key=key,
            metadata={
                'product': self.product.name,
                'product_id': self.product.product_id,
                'created_from': 'web',
            },
        )

        try:
            with DjangoUnitOfWork() as uow:
                self.payment_repo.add(payment)
                uow.collect_events(payment)
        except IntegrityError:
            # Lost a race against a concurrent request with the same key.
            existing = self._replay(key, command.user_id)
            if existing is None:
                raise
            logger.info(f"Concurrent create for key {key} resolved to {existing.order_id}")
            return CreatePaymentResult(payment=existing, created=False)

        logger.info(
            f"Created payment {payment.order_id} for user {user.id}, "
            f"amount {payment.amount}"
        )

        request = SnapRequest(
            order_id=payment.order_id,
            gross_amount=payment.amount.amount,
            customer=SnapCustomer(
                first_name=user.gateway_first_name,
                last_name=user.last_name,
                email=user.email,
                phone=user.phone,
            ),
            items=(
                SnapItem(
                    id=self.product.product_id,
                    name=self.product.name,
                    price=self.product.price.amount,
                ),
            ),
        )

        try:
            session = self.gateway.create_transaction(request)
        except Exception as e:
            logger.error(f"Gateway session for {payment.order_id} failed, marking FAILED: {e}")
            with DjangoUnitOfWork() as uow:
                failed = self.payment_repo.get(payment.id, lock=True)
                if failed is not None and failed.status == PaymentStatus.PENDING:
                    failed.mark_failed(reason=str(e))
                    self.payment_repo.save(failed)
                    uow.collect_events(failed)
            raise

        with DjangoUnitOfWork() as uow:
            current = self.payment_repo.get(payment.id, lock=True)
            current.attach_session(session.token, session.redirect_url)
            self.payment_repo.save(current)
            uow.collect_events(current)

        return CreatePaymentResult(payment=current, created=True)

    def _replay(self, key: Optional[str], user_id) -> Optional[PaymentTransaction]:
        """The payment stored under ``key``; a key owned by another user is refused"""
        if not key:
            return None
        existing = self.payment_repo.get_by_idempotency_key(key)
        if existing is None:
            return None
        if existing.user_id != user_id:
            logger.warning(f"User {user_id} reused idempotency key {key} owned by another user")
            raise ValidationError(
                "Idempotency key is already used by another request.",
                code="idempotency_key_conflict",
            )
        return existing


class ProcessWebhookHandler:
    """
    Handler for ProcessWebhook command

    Protocol (steps 2-6 run inside one transaction, under a row lock on
    the payment, so duplicate deliveries are serialized):
    1. Verify the signature, reject with ForbiddenError on mismatch
    2. Load the payment by order id, NotFoundError if unknown
    3. Already final: duplicate delivery, return without changes
    4. Store the raw payload
    5. Apply the status family; on success activate the subscription in a
       savepoint, and keep the payment SUCCESS even if activation fails
    6. Save and publish events after commit
    """

    def __init__(self, payment_repo, activate_subscription, server_key: str, premium_days: int = 30):
        self.payment_repo = payment_repo
        self.activate_subscription = activate_subscription
        self.server_key = server_key
        self.premium_days = premium_days

    def handle(self, command: ProcessWebhookCommand) -> WebhookResult:
        notification = command.notification
        started = time.perf_counter()
        outcome = 'failed'
        user_id = None

        try:
            result = self._process(notification)
            outcome = result.outcome
            user_id = result.user_id
            return result
        except ForbiddenError:
            outcome = 'rejected'
            raise
        except NotFoundError:
            outcome = 'not_found'
            raise
        finally:
            elapsed = time.perf_counter() - started
            metrics.WEBHOOK_PROCESSING_SECONDS.labels(result=outcome).observe(elapsed)
            metrics.WEBHOOK_PROCESSED.labels(
                result=outcome,
                transaction_status=notification.transaction_status or 'unknown',
            ).inc()
            log_business_event(
                'PAYMENT_WEBHOOK_PROCESSED',
                user_id,
                order_id=notification.order_id,
                transaction_status=notification.transaction_status,
                result=outcome,
                duration_ms=round(elapsed * 1000, 2),
            )

    def _process(self, notification: WebhookNotification) -> WebhookResult:
        if not verify_signature(
            notification.order_id,
            notification.status_code,
            notification.gross_amount,
            self.server_key,
            notification.signature_key,
        ):
            logger.warning(f"Invalid webhook signature for order {notification.order_id}")
            metrics.WEBHOOK_INVALID_SIGNATURE.inc()
            raise ForbiddenError("Invalid signature", code='invalid_signature')

        with DjangoUnitOfWork() as uow:
            payment = self.payment_repo.get_by_order_id(notification.order_id, lock=True)
            if payment is None:
                raise NotFoundError(f"Payment with order id {notification.order_id} not found")

            if payment.is_final():
                logger.info(
                    f"Duplicate webhook for order {payment.order_id}: "
                    f"already {payment.status.value}, ignoring '{notification.transaction_status}'"
                )
                return WebhookResult(
                    order_id=payment.order_id,
                    outcome='duplicate',
                    status=payment.status.value,
                    user_id=payment.user_id,
                    subscription_id=payment.subscription_id,
                )

            payment.record_webhook(notification.raw)
            outcome = self._apply(payment, notification)

            self.payment_repo.save(payment)
            uow.collect_events(payment)

        logger.info(
            f"Webhook for order {payment.order_id} handled: "
            f"'{notification.transaction_status}' -> {payment.status.value}"
        )
        return WebhookResult(
            order_id=payment.order_id,
            outcome=outcome,
            status=payment.status.value,
            user_id=payment.user_id,
            subscription_id=payment.subscription_id,
        )

    def _apply(self, payment: PaymentTransaction, notification: WebhookNotification) -> str:
        family = notification.family

        if family == StatusFamily.SUCCESS:
            if notification.is_fraud_flagged():
                logger.warning(
                    f"Order {payment.order_id} settled with fraud_status "
                    f"'{notification.fraud_status}'"
                )
            payment.mark_success(notification.transaction_id, map_payment_method(notification.payment_type))
            subscription_id = self._activate_subscription(payment)
            if subscription_id is not None:
                payment.link_subscription(subscription_id)
            return 'success'

        if family == StatusFamily.PENDING:
            payment.record_gateway_transaction(notification.transaction_id)
            return 'pending'

        if family == StatusFamily.FAILURE:
            payment.record_gateway_transaction(notification.transaction_id)
            if notification.transaction_status == 'expire':
                payment.mark_expired()
            elif notification.transaction_status == 'cancel':
                payment.mark_cancelled()
            else:
                payment.mark_failed(reason=notification.transaction_status)
            return 'failure'

        logger.warning(
            f"Unhandled transaction status '{notification.transaction_status}' "
            f"for order {payment.order_id}; payload stored only"
        )
        return 'ignored'

    def _activate_subscription(self, payment: PaymentTransaction) -> Optional[UUID]:
        """Activate or extend PREMIUM; failures are logged and counted, never raised"""
        try:
            subscription = self.activate_subscription.handle(ActivateSubscriptionCommand(
                user_id=payment.user_id,
                payment_id=payment.id,
                days=self.premium_days,
            ))
        except Exception as e:
            logger.error(
                f"Subscription activation failed for order {payment.order_id} "
                f"(user {payment.user_id}): {e}",
                exc_info=True,
            )
            metrics.SUBSCRIPTION_ACTIVATION_FAILED.inc()
            return None
        return subscription.id

