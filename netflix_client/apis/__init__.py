from .profiles_api import ProfilesApi
from .ratings_api import RatingsApi

__all__ = ["ProfilesApi", "RatingsApi"]
