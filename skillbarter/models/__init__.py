"""
SkillBarter – SQLAlchemy ORM models package.

Imports all model classes so the app can discover them through a single
``from skillbarter.models import *`` import.
"""

from skillbarter.models.user import User                          # noqa: F401
from skillbarter.models.availability import AvailabilitySlot      # noqa: F401
from skillbarter.models.tutor_offer import TutorOffer             # noqa: F401
