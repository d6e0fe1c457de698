"""Shared Jinja2 environment for all HTML routes."""

from pathlib import Path

from fastapi.templating import Jinja2Templates

from skillbarter.config import settings
from skillbarter.models.skill import SkillCategory, SkillLevel, SkillProgress

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

# ── Category → Bootstrap colour mapping ──
CATEGORY_COLORS = {
    "Technology": "primary",
    "Music": "info",
    "Language": "success",
    "Art": "danger",
    "Cooking": "warning",
    "Fitness": "success",
    "Business": "dark",
    "Science": "info",
    "Mathematics": "primary",
    "Other": "secondary",
}

templates.env.globals.update(
    app_name=settings.APP_NAME,
    category_colors=CATEGORY_COLORS,
    categories=[c.value for c in SkillCategory],
    levels=[lvl.value for lvl in SkillLevel],
    progresses=[p.value for p in SkillProgress],
)
