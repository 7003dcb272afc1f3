"""
Domain exceptions
"""
from typing import Optional


class PromoSyncError(Exception):
    """Base class for PromoSync errors"""


class PersistenceUnavailable(PromoSyncError):
    """The persistence collaborator failed to read or write"""

    def __init__(self, operation: str, collection: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.collection = collection
        self.cause = cause
        message = f"Persistence {operation} on '{collection}' failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class UnknownTier(PromoSyncError):
    """Requested tier id is not in the plan catalog"""

    def __init__(self, tier_id: str):
        self.tier_id = tier_id
        super().__init__(f"Unknown tier: {tier_id}")


class UnknownCollection(PromoSyncError):
    """Collection name has no backing table"""

    def __init__(self, collection: str):
        self.collection = collection
        super().__init__(f"Unknown collection: {collection}")


class FeatureLocked(PromoSyncError):
    """Current tier does not grant the capability"""

    def __init__(self, feature: str, sub_feature: Optional[str], message: str):
        self.feature = feature
        self.sub_feature = sub_feature
        self.message = message
        super().__init__(message)


class FeatureLimitReached(PromoSyncError):
    """Monthly quota for a metered feature is used up"""

    def __init__(self, feature: str, check, message: str):
        self.feature = feature
        self.check = check
        self.message = message
        super().__init__(message)
