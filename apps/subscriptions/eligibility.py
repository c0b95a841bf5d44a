"""Trial eligibility."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class TrialEligibilityChecker:
    """
    A user may start the trial only if they never had one, never held
    PREMIUM (live or expired) and never paid successfully. Checks stop at
    the first disqualifier.
    """

    def __init__(self, subscription_repo, payment_repo):
        self.subscription_repo = subscription_repo
        self.payment_repo = payment_repo

    def is_eligible(self, user_id) -> bool:
        if self.subscription_repo.has_had_trial(user_id):
            logger.debug(f"User {user_id} already had a trial")
            return False
        if self.subscription_repo.has_had_premium(user_id):
            logger.debug(f"User {user_id} already had PREMIUM")
            return False
        if self.payment_repo.has_successful_payment(user_id):
            logger.debug(f"User {user_id} already paid")
            return False
        return True
