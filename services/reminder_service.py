"""
services/reminder_service.py
-----------------------------
Daily renewal reminder job.

On each run every active subscription (all users) is checked once. A
subscription qualifies when its next payment date minus the effective lead
time falls on today's calendar date in the operating timezone. Each
qualifying subscription gets exactly one email per run.

Known limitations, kept on purpose:
  - No "already sent" state. Running twice on the same day sends twice;
    the host must trigger at most once per day.
  - A failed send is not retried. Tomorrow the reminder date has passed,
    so that reminder is lost.
  - Records are only read, never modified.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Callable, Optional

import pytz

from models.subscription import REMINDER_LEAD_DAYS, REMINDER_NONE, Subscription
from models.user import User
from repositories.base import SubscriptionRepository, UserRepository
from services.email_service import EmailSender, build_reminder_email
from utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LEAD_DAYS = 1


@dataclass
class ReminderRunResult:
    scanned: int = 0
    sent: int = 0
    skipped: int = 0
    failed: int = 0


def resolve_lead_days(subscription: Subscription, user: User) -> int:
    """
    Effective reminder lead time in days:
    the subscription's own option, else the user's default, else 1.
    """
    reminder = subscription.reminder
    if reminder and reminder != REMINDER_NONE:
        days = REMINDER_LEAD_DAYS.get(reminder)
        if days is not None:
            return days
        logger.warning(f"Unknown reminder option '{reminder}' on subscription #{subscription.id}")
    if user.reminder_days:
        return user.reminder_days
    return DEFAULT_LEAD_DAYS


def reminder_date(subscription: Subscription, lead_days: int, tz: pytz.BaseTzInfo) -> date:
    """Calendar date (in ``tz``) on which the reminder should go out."""
    payment_date = subscription.next_payment_date
    if payment_date.tzinfo is None:
        payment_date = tz.localize(payment_date)
    return (payment_date.astimezone(tz) - timedelta(days=lead_days)).date()


class ReminderService:
    """
    Selects due reminders and dispatches them.

    Collaborators are injected so tests can use in-memory repositories,
    a fake sender and a fixed clock.
    """

    def __init__(
        self,
        subscription_repo: SubscriptionRepository,
        user_repo: UserRepository,
        email_sender: EmailSender,
        clock: Callable[[], datetime],
        tz: pytz.BaseTzInfo,
    ):
        self.subscription_repo = subscription_repo
        self.user_repo = user_repo
        self.email_sender = email_sender
        self.clock = clock
        self.tz = tz

    def get_owner(self, subscription: Subscription) -> Optional[User]:
        return self.user_repo.get_by_id(subscription.user_id)

    def _today(self) -> date:
        now = self.clock()
        if now.tzinfo is None:
            now = self.tz.localize(now)
        return now.astimezone(self.tz).date()

    def run(self) -> ReminderRunResult:
        """
        Scan all active subscriptions and send today's reminders.
        Called by the scheduler once per day.
        """
        result = ReminderRunResult()
        today = self._today()
        subscriptions = self.subscription_repo.list_active()
        logger.info(f"Reminder run for {today}: {len(subscriptions)} active subscriptions")

        for sub in subscriptions:
            result.scanned += 1
            user = self.get_owner(sub)
            if user is None:
                logger.warning(f"Subscription #{sub.id} has no owner (user {sub.user_id}); skipping")
                result.skipped += 1
                continue
            if not user.email_notifications or user.deactivated:
                logger.debug(f"Notifications off for user {user.id}; skipping #{sub.id}")
                result.skipped += 1
                continue

            lead_days = resolve_lead_days(sub, user)
            if reminder_date(sub, lead_days, self.tz) != today:
                continue

            if self._dispatch(user, sub, lead_days):
                result.sent += 1
            else:
                result.failed += 1

        logger.info(
            f"Reminder run finished: sent={result.sent} failed={result.failed} "
            f"skipped={result.skipped} scanned={result.scanned}"
        )
        return result

    def _dispatch(self, user: User, sub: Subscription, lead_days: int) -> bool:
        try:
            subject, body, html = build_reminder_email(user, sub, lead_days)
            ok = self.email_sender.send(user.email, subject, body, html=html)
        except Exception as e:
            logger.error(f"Failed to send reminder for '{sub.name}' (#{sub.id}) to {user.email}: {e}")
            return False

        if ok:
            logger.info(f"Sent reminder for '{sub.name}' to {user.email}, due in {lead_days} days")
        else:
            logger.error(f"Email sender rejected reminder for '{sub.name}' (#{sub.id}) to {user.email}")
        return ok
