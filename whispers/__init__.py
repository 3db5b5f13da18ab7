"""
Whispers Application Package

This package contains the code for Whispers, a small blogging platform of
short posts ("whispers") with profile pages and an expanded whisper viewer.
The package is organized as follows:

- config.py: Application configuration and environment settings
- database.py: Database connection and session management
- limiter.py: Rate limiting configuration
- main.py: FastAPI application entry point and landing page
- models.py: SQLAlchemy ORM database models
- schemas.py: Pydantic whisper records shared by the API and the viewer
- templating.py: Jinja2 template configuration

Subpackages:
- routes/: API and page route handlers (posts, profiles)
- services/: Data access and the viewer's fetch layer (posts, feed)
- utils/: Utility functions (text formatting, validators)
- viewer/: The whisper viewer (store, selection, timer, navigation, surface)
- templates/: HTML templates for server-side rendering
"""
