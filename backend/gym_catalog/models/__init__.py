"""
Database models export.
Import all models here to make them available for Alembic migrations.
"""
from gym_catalog.models.gym import Gym, GymSpace, GymSector
from gym_catalog.models.gym_grade import GymGrade, GymGradeLine
from gym_catalog.models.gym_route import GymRoute, GymOpener, gym_route_openers
from gym_catalog.models.ascent import AscentGymRoute

__all__ = [
    "Gym",
    "GymSpace",
    "GymSector",
    "GymGrade",
    "GymGradeLine",
    "GymRoute",
    "GymOpener",
    "gym_route_openers",
    "AscentGymRoute",
]
