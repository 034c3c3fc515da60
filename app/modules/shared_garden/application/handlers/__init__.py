"""
Shared Garden Handlers

- GardenCommandHandler: dispatches write commands to the engine
- GardenQueryHandler: assembles read models
"""
