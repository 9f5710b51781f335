# ABOUTME: Converts a date-range preset or custom bounds into a concrete query window.
# ABOUTME: Bounds are always clamped so that start <= end <= now.

from datetime import UTC, datetime, time, timedelta

from prep_pulse.models import DateRangePreset, DateWindow

PRESET_SPANS = {
    DateRangePreset.LAST_24H: timedelta(hours=24),
    DateRangePreset.WEEK: timedelta(days=7),
    DateRangePreset.MONTH: timedelta(days=30),
}


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def resolve_window(
    preset: DateRangePreset | str,
    custom: tuple[datetime | None, datetime | None] | None = None,
    now: datetime | None = None,
) -> DateWindow:
    """Resolve a preset into a DateWindow.

    The month preset is day-granular: start is pinned to midnight and end to
    the last instant of the day, then clamped to now. Custom bounds in the
    future are clamped to now; a missing custom range falls back to a week.

    Args:
        preset: Range selector.
        custom: Explicit (start, end) bounds, used only for the custom preset.
        now: Reference instant. Defaults to the current UTC time.

    Returns:
        A window satisfying start <= end <= now.
    """
    preset = DateRangePreset(preset)
    now = _as_utc(now) if now else datetime.now(UTC)

    if preset is DateRangePreset.CUSTOM:
        if custom is None or None in custom:
            preset = DateRangePreset.WEEK
        else:
            start, end = (min(_as_utc(bound), now) for bound in custom)
            return DateWindow(start=min(start, end), end=end)

    start = now - PRESET_SPANS[preset]
    end = now

    if preset is DateRangePreset.MONTH:
        start = datetime.combine(start.date(), time.min, tzinfo=UTC)
        end = min(datetime.combine(now.date(), time.max, tzinfo=UTC), now)

    return DateWindow(start=start, end=end)
