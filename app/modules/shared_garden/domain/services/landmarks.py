# 📄 File: app/modules/shared_garden/domain/services/landmarks.py
# 🧭 Purpose (Layman Explanation):
# Lets partners rearrange the big background pieces (mountains, windmills): drag them
# around, bring one to the front, push one to the back, or take one away.
# 🧪 Purpose (Technical Summary):
# Landmark ordering manager. Landmarks only obey canvas bounds, never the collision
# rule, and their draw order is a free integer z_index.
# 🔗 Dependencies:
# GardenState, GardenRules, economy (bounds and z-index helpers)
# 🔄 Connected Modules / Calls From:
# Shared garden engine (update_landmark_position, delete_landmark, move_landmark_to_front/back)

from ..models.garden import GardenState
from ..models.outcomes import LandmarkOutcome, LandmarkResult
from ..models.rules import GardenRules
from .economy import next_back_z_index, next_front_z_index, validate_position


def update_position(state: GardenState, landmark_id: str, x: float, y: float, rules: GardenRules) -> LandmarkResult:
    validate_position(x, y, rules)
    landmark = state.find_landmark(landmark_id)
    if landmark is None:
        return LandmarkResult(outcome=LandmarkOutcome.NOT_FOUND)
    landmark.x = x
    landmark.y = y
    return LandmarkResult(outcome=LandmarkOutcome.UPDATED, landmark=landmark)


def move_to_front(state: GardenState, landmark_id: str) -> LandmarkResult:
    landmark = state.find_landmark(landmark_id)
    if landmark is None:
        return LandmarkResult(outcome=LandmarkOutcome.NOT_FOUND)
    landmark.z_index = next_front_z_index(state)
    return LandmarkResult(outcome=LandmarkOutcome.UPDATED, landmark=landmark)


def move_to_back(state: GardenState, landmark_id: str) -> LandmarkResult:
    landmark = state.find_landmark(landmark_id)
    if landmark is None:
        return LandmarkResult(outcome=LandmarkOutcome.NOT_FOUND)
    landmark.z_index = next_back_z_index(state)
    return LandmarkResult(outcome=LandmarkOutcome.UPDATED, landmark=landmark)


def delete(state: GardenState, landmark_id: str) -> LandmarkResult:
    """Remove a single landmark. Unlike bulk removal this pays nothing back."""
    landmark = state.find_landmark(landmark_id)
    if landmark is None:
        return LandmarkResult(outcome=LandmarkOutcome.NOT_FOUND)
    state.landmarks = [item for item in state.landmarks if item.id != landmark_id]
    return LandmarkResult(outcome=LandmarkOutcome.DELETED, landmark=landmark)
