# __init__.py
from skillswap.schemas.profile import MessageResponse, ProfileRead, ProfileSkillRead, ProfileUpdate, UserSkillCreate
from skillswap.schemas.public_user import MatchResultRead, Pagination, PublicUser, UserMatch, UsersPage
from skillswap.schemas.rating import RatingCreate, RatingRead
from skillswap.schemas.skills import SkillCreate, SkillProposal, SkillRead
from skillswap.schemas.swap_request import SwapRequestCreate, SwapRequestDetail, SwapRequestPage
from skillswap.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead

__all__ = [
	"MessageResponse",
	"ProfileRead",
	"ProfileSkillRead",
	"ProfileUpdate",
	"UserSkillCreate",
	"MatchResultRead",
	"Pagination",
	"PublicUser",
	"UserMatch",
	"UsersPage",
	"RatingCreate",
	"RatingRead",
	"SkillCreate",
	"SkillProposal",
	"SkillRead",
	"SwapRequestCreate",
	"SwapRequestDetail",
	"SwapRequestPage",
	"AuthResponse",
	"UserCreate",
	"UserLogin",
	"UserRead",
]
