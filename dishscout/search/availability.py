"""Opening-hours-aware availability.

Only the entry for the current weekday is consulted and times are compared in
whole minutes since midnight. Hours that cross midnight are not supported: a
venue closing at 02:00 has to be encoded on the same day entry.
"""

from dishscout.models.domain import Restaurant
from dishscout.models.query import TimeContext
from dishscout.models.results import OpenStatus

DEFAULT_CLOSING_SOON_MINUTES = 60


def check_open(
    restaurant: Restaurant,
    time_context: TimeContext,
    closing_soon_minutes: int = DEFAULT_CLOSING_SOON_MINUTES,
) -> OpenStatus:
    """Return the open/closing_soon/closed/unknown verdict for a moment."""
    if restaurant.opening_hours is None:
        return OpenStatus(status="unknown", label="Hours unknown")

    today = restaurant.opening_hours.get(time_context.day_of_week)
    if today is None or today.closed:
        return OpenStatus(status="closed", label="Closed today")

    now = time_context.minutes_since_midnight
    opens, closes = today.open_minutes, today.close_minutes

    if now < opens:
        return OpenStatus(
            status="closed",
            label=f"Opens at {today.open}",
            opens_at=today.open,
            closes_at=today.close,
        )
    if now > closes:
        return OpenStatus(
            status="closed",
            label=f"Closed · opened {today.open}-{today.close}",
            opens_at=today.open,
            closes_at=today.close,
        )

    if closes - now <= closing_soon_minutes:
        return OpenStatus(
            status="closing_soon",
            label=f"Closing soon · closes {today.close}",
            opens_at=today.open,
            closes_at=today.close,
        )
    return OpenStatus(
        status="open",
        label=f"Open now · closes {today.close}",
        opens_at=today.open,
        closes_at=today.close,
    )
