import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Department tag used for the demo roster
DEPARTMENT = os.getenv("DEPARTMENT", "Computer Science")

# Seed a demo HOD, faculty member, class and timetable on startup
SEED_DEMO_DATA = bool(int(os.getenv("SEED_DEMO_DATA", "1")))
