DEBUG = False  # set to False in production mode

SECRET_KEY = "CHANGE_ME"


# DATABASES

# Primary database
SQLALCHEMY_DATABASE_URI = "postgresql://learn@db/learn"


# LOCATIONS

# Base URL of the client application, challenge paths are appended to it
HOME_LOCATION = "http://localhost:8000"
# Where anonymous users are sent. Defaults to HOME_LOCATION + "/learn"
LEARN_URL = None


# LOGGING

LOG_FILE_ENABLED = False
LOG_FILE = "./learn.log"

LOG_SENTRY_ENABLED = False
SENTRY_DSN = ""
SENTRY_ENVIRONMENT = "production"
