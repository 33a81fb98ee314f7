"""Thermal simulation of a pot of liquid with food in it."""

from .foods import FOOD_DATA, FoodItem, FoodKind, Inventory
from .thermal_model import HeatSource, PotState, ThermalInvariantError, ThermalParameters

__all__ = [
    "FOOD_DATA",
    "FoodItem",
    "FoodKind",
    "Inventory",
    "HeatSource",
    "PotState",
    "ThermalInvariantError",
    "ThermalParameters",
]
