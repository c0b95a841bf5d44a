"""
Domain Errors

A small, closed taxonomy shared by every app. Application code raises these;
``shared.api.exception_handler`` turns them into HTTP responses.

- ValidationError: bad input or a broken invariant (400)
- NotFoundError: unknown order, user or subscription (404)
- ForbiddenError: signature mismatch or missing entitlement (403)
- InvalidStateTransition: illegal state machine move, a programming error (500)
- ExternalServiceError: payment gateway unreachable, timed out or refused (502)
"""


class DomainError(Exception):
    """Base class for errors raised by domain and application code"""

    code = 'domain_error'

    def __init__(self, message: str = '', *, code: str | None = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def __str__(self):
        return self.message


class ValidationError(DomainError):
    code = 'validation_error'


class NotFoundError(DomainError):
    code = 'not_found'


class ForbiddenError(DomainError):
    code = 'forbidden'


class InvalidStateTransition(DomainError):
    code = 'invalid_state_transition'

    def __init__(self, current, target, *, entity: str = 'entity'):
        current_value = getattr(current, 'value', current)
        target_value = getattr(target, 'value', target)
        super().__init__(
            f"Cannot move {entity} from {current_value} to {target_value}"
        )
        self.current = current
        self.target = target


class ExternalServiceError(DomainError):
    code = 'external_service_error'

    def __init__(self, message: str = '', *, service: str = 'external', code: str | None = None):
        super().__init__(message, code=code)
        self.service = service
