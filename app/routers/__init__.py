# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - inquiries.py: Contact form and the admin student board
# - students.py: Enrolled students
# - photos.py / videos.py: Public galleries and the admin media manager
# - testimonials.py: Testimonials
# - profile.py: Academy profile
# - notifications.py: Inquiry emails
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import inquiries
from . import students
from . import photos
from . import videos
from . import testimonials
from . import profile
from . import notifications

__all__ = [
    "health",
    "inquiries",
    "students",
    "photos",
    "videos",
    "testimonials",
    "profile",
    "notifications",
]
