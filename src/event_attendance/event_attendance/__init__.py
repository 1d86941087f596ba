"""Event Attendance package.

Geofenced check-in and presence tracking for campus events. Feature modules
(events, attendance, eligibility, geofence, ...) keep a thin Flask controller
layer over service and repository layers.
"""
