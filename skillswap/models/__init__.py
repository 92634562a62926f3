from skillswap.models.admin_message import AdminMessage
from skillswap.models.rating import Rating
from skillswap.models.skills import Skill
from skillswap.models.swap_request import SwapRequest
from skillswap.models.user import User
from skillswap.models.user_skill import UserSkill

__all__ = [
	"AdminMessage",
	"Rating",
	"Skill",
	"SwapRequest",
	"User",
	"UserSkill",
]
