"""
Database models
"""
from promosync.models.profile import Profile
from promosync.models.usage import UsageCounter
from promosync.models.user_metrics import UserMetrics
from promosync.models.contract import Contract, ContractStatus
from promosync.models.application import Application, ApplicationStatus
from promosync.models.revenue import RevenueEntry
from promosync.models.media_kit import MediaKit
from promosync.models.pitch import Pitch
from promosync.models.saved_rate import SavedRate

__all__ = [
    "Profile",
    "UsageCounter",
    "UserMetrics",
    "Contract",
    "ContractStatus",
    "Application",
    "ApplicationStatus",
    "RevenueEntry",
    "MediaKit",
    "Pitch",
    "SavedRate",
]
