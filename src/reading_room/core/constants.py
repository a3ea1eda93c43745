"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_FEE = 500
DEFAULT_SHIFT = ""

# Month keys must not depend on the process locale.
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

REMINDER_TEMPLATE = (
    "Hello {name}, this is a reminder that your library fee of ₹{fee} is pending. Please pay it soon."
)
ALERT_SENT_MESSAGE = "WhatsApp alert sent successfully!"
