from __future__ import annotations

from typing import Literal


RATING_MIN = 1
RATING_MAX = 5
NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
SKILL_NAME_MIN_LENGTH = 2
SKILL_NAME_MAX_LENGTH = 50

ROLE_USER = "USER"
ROLE_ADMIN = "ADMIN"

SkillLevel = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED", "EXPERT"]
SkillType = Literal["OFFERED", "WANTED"]
RequestStatus = Literal["PENDING", "ACCEPTED", "REJECTED", "COMPLETED", "CANCELLED"]
Availability = Literal["weekdays", "weekends", "evenings", "mornings", "afternoons", "flexible"]

# Seeded, pre-approved skill catalogue.
DEFAULT_SKILLS: tuple[tuple[str, str], ...] = (
    ("JavaScript", "Programming"),
    ("Python", "Programming"),
    ("React", "Programming"),
    ("Node.js", "Programming"),
    ("HTML/CSS", "Programming"),
    ("Database Design", "Programming"),
    ("Photoshop", "Design"),
    ("Illustrator", "Design"),
    ("Figma", "Design"),
    ("UI/UX Design", "Design"),
    ("Logo Design", "Design"),
    ("Excel", "Office"),
    ("PowerPoint", "Office"),
    ("Word", "Office"),
    ("Data Analysis", "Office"),
    ("English", "Language"),
    ("Spanish", "Language"),
    ("French", "Language"),
    ("German", "Language"),
    ("Photography", "Creative"),
    ("Video Editing", "Creative"),
    ("Music Production", "Creative"),
    ("Writing", "Creative"),
    ("Project Management", "Business"),
    ("Marketing", "Business"),
    ("Sales", "Business"),
    ("Accounting", "Business"),
)
