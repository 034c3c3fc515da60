"""
Shared garden domain services.

- pairing: couple key resolution
- health: fresh/wilting/wilted derivation and growth stages
- watering: cooldown guard, harmony and streaks
- punishment: neglect penalty and revival
- economy: planting, collisions, refunds, water drops
- landmarks: position and z-order management
"""
