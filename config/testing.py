SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

DEPARTMENT = "Computer Science"

SEED_DEMO_DATA = False
