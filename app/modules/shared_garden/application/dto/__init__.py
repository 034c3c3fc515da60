"""
Shared Garden Data Transfer Objects

Serializable read models: GardenViewDTO, GardenStatusDTO, WateringEligibilityDTO.
"""
