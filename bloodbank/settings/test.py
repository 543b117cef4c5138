from .base import *

DEBUG = False
SECRET_KEY = "bloodbank-test-key"
ALLOWED_HOSTS = ["testserver"]

DATABASES = {
    "default": {"ENGINE": "django.db.backends.sqlite3", "NAME": ":memory:"},
}

DONOR_ELIGIBILITY_DAYS = 90

# Keep test output quiet; assertLogs still captures INFO records
LOGGING["root"]["level"] = "WARNING"
