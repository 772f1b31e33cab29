from fitbody.models.user import User
from fitbody.models.workout import Workout
from fitbody.models.nutrition import NutritionEntry, FoodSourceEnum
from fitbody.models.progress import Progress

__all__ = [
    "User",
    "Workout",
    "NutritionEntry", "FoodSourceEnum",
    "Progress",
]
