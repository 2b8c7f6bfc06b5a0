"""Service layer aggregation for persistence, navigation, contrast and recommendations.

Provides convenience re-exports so callers can import the core vault services from a single namespace.
"""

from .collection_controller import CollectionController
from .contrast_controller import ContrastController
from .input_router import InputRouter
from .navigation_controller import NavigationStateMachine
from .persistence_store import PersistenceStore, migrate_items
from .recommendation_service import GeminiRecommendationClient, RecommendationController

__all__ = [
    "CollectionController",
    "ContrastController",
    "GeminiRecommendationClient",
    "InputRouter",
    "NavigationStateMachine",
    "PersistenceStore",
    "RecommendationController",
    "migrate_items",
]
