"""
API Routes Package

This package contains FastAPI route handlers for the application.
Each module defines routes for a specific feature area:

- posts.py: JSON API (whisper listing, health check)
- profiles.py: Server-rendered profile feeds

Routes are registered in main.py using FastAPI's router system.
The landing page itself lives in main.py.
"""
