"""Tests for landmark positioning and draw order."""

import pytest

from app.shared.core.exceptions import ValidationError
from app.modules.shared_garden.domain.models.garden import PlantedLandmark
from app.modules.shared_garden.domain.models.outcomes import LandmarkOutcome
from app.modules.shared_garden.domain.services import landmarks

from conftest import ALICE, START


@pytest.fixture
def scenery(garden):
    """Three landmarks stacked back to front."""
    for z_index, kind in enumerate(("mountain", "windmill", "cooling_tower")):
        garden.landmarks.append(PlantedLandmark(
            id=kind, type=kind, x=50.0 * (z_index + 1), y=100, z_index=z_index,
            planted_at=START, planted_by=ALICE,
        ))
    return garden


def z_order(garden):
    return [lm.id for lm in sorted(garden.landmarks, key=lambda lm: lm.z_index)]


class TestPosition:

    def test_move_landmark(self, scenery, rules):
        result = landmarks.update_position(scenery, "windmill", 300, 350, rules)
        assert result.outcome == LandmarkOutcome.UPDATED
        assert (result.landmark.x, result.landmark.y) == (300, 350)
        assert scenery.find_landmark("windmill").x == 300

    def test_move_off_canvas_rejected(self, scenery, rules):
        with pytest.raises(ValidationError):
            landmarks.update_position(scenery, "windmill", 500, 10, rules)
        assert scenery.find_landmark("windmill").x == 100

    def test_move_unknown_landmark(self, scenery, rules):
        result = landmarks.update_position(scenery, "lighthouse", 10, 10, rules)
        assert result.outcome == LandmarkOutcome.NOT_FOUND
        assert result.landmark is None

    def test_landmarks_may_overlap(self, scenery, rules):
        """Landmarks ignore collisions, even with each other."""
        landmarks.update_position(scenery, "windmill", 50, 100, rules)
        assert scenery.find_landmark("windmill").x == scenery.find_landmark("mountain").x


class TestZOrder:
    """Front/back moves place a landmark above or below all others."""

    def test_move_to_front(self, scenery):
        result = landmarks.move_to_front(scenery, "mountain")
        assert result.landmark.z_index == 3
        assert z_order(scenery) == ["windmill", "cooling_tower", "mountain"]

    def test_move_to_back(self, scenery):
        result = landmarks.move_to_back(scenery, "cooling_tower")
        assert result.landmark.z_index == -1
        assert z_order(scenery) == ["cooling_tower", "mountain", "windmill"]

    def test_repeated_moves_keep_order_strict(self, scenery):
        landmarks.move_to_back(scenery, "windmill")
        landmarks.move_to_back(scenery, "cooling_tower")
        assert z_order(scenery) == ["cooling_tower", "windmill", "mountain"]
        assert len({lm.z_index for lm in scenery.landmarks}) == 3

    def test_unknown_landmark(self, scenery):
        assert landmarks.move_to_front(scenery, "nope").outcome == LandmarkOutcome.NOT_FOUND
        assert landmarks.move_to_back(scenery, "nope").outcome == LandmarkOutcome.NOT_FOUND


class TestDelete:

    def test_delete_single_landmark(self, scenery):
        result = landmarks.delete(scenery, "windmill")
        assert result.outcome == LandmarkOutcome.DELETED
        assert result.landmark.id == "windmill"
        assert [lm.id for lm in scenery.landmarks] == ["mountain", "cooling_tower"]

    def test_delete_unknown_landmark(self, scenery):
        assert landmarks.delete(scenery, "nope").outcome == LandmarkOutcome.NOT_FOUND
        assert len(scenery.landmarks) == 3
