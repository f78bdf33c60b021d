"""
Certificate Template Registry
Selectable HTML templates and their location on disk
"""

from pathlib import Path
from typing import List, Optional

from app.config import settings
from app.logging_config import get_logger

logger = get_logger("TEMPLATE")

AVAILABLE_TEMPLATES = [
    {
        "name": "Default",
        "filename": "certificate-default.html",
        "description": "Classic purple gradient design",
        "color": "#667eea",
    },
    {
        "name": "Bootcamp",
        "filename": "certificate-bootcamp.html",
        "description": "Technical blue theme for bootcamps",
        "color": "#3b82f6",
    },
    {
        "name": "Workshop",
        "filename": "certificate-workshop.html",
        "description": "Creative green theme for workshops",
        "color": "#10b981",
    },
    {
        "name": "Hackathon",
        "filename": "certificate-hackathon.html",
        "description": "Dynamic orange theme for hackathons",
        "color": "#f97316",
    },
]


def get_available_templates() -> List[dict]:
    return AVAILABLE_TEMPLATES


def get_template_by_filename(filename: str) -> Optional[dict]:
    return next((t for t in AVAILABLE_TEMPLATES if t["filename"] == filename), None)


def is_valid_template_filename(filename: str) -> bool:
    return get_template_by_filename(filename) is not None


def get_template_dir() -> Path:
    return Path(settings.CERTIFICATE_TEMPLATE_DIR)


def get_template_path(filename: str) -> Path:
    return get_template_dir() / filename


def validate_template(filename: str) -> bool:
    """True when the template file exists on disk"""
    if get_template_path(filename).is_file():
        return True
    logger.error(f"Template not found: {filename}")
    return False
