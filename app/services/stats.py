from datetime import datetime, timedelta
from typing import Iterable

from app.core.config import settings
from app.models.secret import Secret
from app.schemas.secret import SecretStats


def compute_stats(secrets: Iterable[Secret], now: datetime, recent_days: int = None) -> SecretStats:
    """Summary counts over one owner's secrets.

    ``viewed`` and ``expired`` are independent predicates, so a secret that
    was viewed and has since expired lands in both buckets and
    ``active + viewed + expired`` may exceed ``total``. The single-label
    ``status`` on each secret lets expiry win instead.
    """
    if recent_days is None:
        recent_days = settings.RECENT_SECRETS_DAYS
    recent_since = now - timedelta(days=recent_days)

    total = viewed = expired = active = one_time = recent = 0
    for secret in secrets:
        total += 1
        is_expired = secret.is_expired(now)
        if secret.is_viewed:
            viewed += 1
        if is_expired:
            expired += 1
        if not secret.is_viewed and not is_expired:
            active += 1
        if secret.one_time_access:
            one_time += 1
        if secret.created_at >= recent_since:
            recent += 1

    return SecretStats(
        total=total,
        active=active,
        viewed=viewed,
        expired=expired,
        one_time_access=one_time,
        recent_secrets=recent,
    )
