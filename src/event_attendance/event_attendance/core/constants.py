"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_METERS = 6_371_000.0

DEFAULT_PRESENT_RATIO = 0.70
DEFAULT_IDLE_RATIO = 0.30

DEFAULT_STATUS_SWEEP_SECONDS = 15
DEFAULT_FINALIZATION_SWEEP_SECONDS = 60

OUTSIDE_STREAK_LENGTH = 3
REASON_SEPARATOR = " | "

REASON_OUTSIDE_STREAK = "Outside the venue for {count} consecutive location updates (since {since:%Y-%m-%d %H:%M:%S})."
REASON_NO_PINGS = "No location updates were detected during the event."
REASON_PARTIAL = "Partially attended the event - present for {percentage:.1f}% of the time."
REASON_MINIMAL = "Minimal attendance - present for only {percentage:.1f}% of the time."
REASON_LATE_ARRIVAL = "Arrived late to the event at {time_in:%Y-%m-%d %H:%M:%S}."
REASON_NO_RECORD = "No attendance recorded - may have missed the event or not registered in time."
REASON_NEVER_ENTERED_VENUE = "Checked in at registration area but never entered the event venue."
REASON_NO_CHECK_IN = "No check-in time recorded."
REASON_LATE_REGISTRATION = "Late registration"
REASON_VENUE_UPGRADE = "Completed registration at venue"
REASON_LATE_VENUE_UPGRADE = "Late arrival at venue"
