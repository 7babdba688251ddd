"""
Job Fair Booth Assignment
Admin backend for job fair events.

Architecture:
- PostgreSQL: job seekers, employers, events, booths, interview slots, assignments
- FastAPI: admin and employer endpoints, JWT auth
"""

__version__ = "1.0.0"
