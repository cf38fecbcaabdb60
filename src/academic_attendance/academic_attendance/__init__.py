"""Academic Attendance package.

Feature modules (users, catalog, timetable, attendance) each hold a domain
model, a repository interface with an in-memory implementation and a service
layer. A thin Flask controller layer wraps the services.
"""
