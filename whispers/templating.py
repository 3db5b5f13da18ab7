"""
Jinja2 Template Configuration

Centralized template loader for rendering HTML responses.
This instance is imported by page routes and by the whisper viewer,
which renders its modal partial outside of a request.
"""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from whispers.utils.text import preview_content


TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Global templates instance pointing to the package templates directory
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# {{ card.content | preview }} shortens long whispers in card lists
templates.env.filters["preview"] = preview_content
