"""Leave Tracker package.

Organized by feature modules (users, subjects, leaves) with a thin Flask
controller layer over service/repository layers. The attendance maths lives
in `aggregation` and has no dependencies on Flask or the database.
"""
