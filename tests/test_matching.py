from pathlib import Path

import pytest

from configs.template_io import load_template_catalog
from contracts import Direction, Keypoint, KeypointLabel, Pose, PoseTemplate, Urgency
from exceptions import InvalidTemplateError, TemplateNotFoundError
from matching import (
    BODY_PART_WEIGHTS,
    BUILTIN_TEMPLATES,
    PoseMatcher,
    calculate_match_score,
    calculate_symmetry,
    detect_framing_issues,
    estimate_difficulty,
    find_best_template,
    generate_adjustments,
    get_template,
    keypoint_error,
    weight_for,
)

THREE_POINT = Pose.from_dict({
    "nose": (0.5, 0.2, 1.0),
    "left_shoulder": (0.4, 0.4, 1.0),
    "right_shoulder": (0.6, 0.4, 1.0),
})


def _template(pose: Pose, template_id: str = "target") -> PoseTemplate:
    return PoseTemplate(template_id=template_id, name=template_id, target_pose=pose)


class TestScoring:
    def test_error_saturates_at_cap(self) -> None:
        origin = Keypoint(0.0, 0.0, 1.0)

        assert keypoint_error(origin, Keypoint(0.3, 0.0)) == 1.0
        assert keypoint_error(origin, Keypoint(0.6, 0.6)) == 1.0
        assert keypoint_error(origin, Keypoint(0.15, 0.0)) == pytest.approx(0.5)

    def test_identical_pose_scores_full(self) -> None:
        score, compared = calculate_match_score(THREE_POINT, THREE_POINT)

        assert score >= 99
        assert compared == 3

    def test_weighted_average(self) -> None:
        observed = THREE_POINT.with_keypoint("nose", Keypoint(0.9, 0.2, 1.0))

        score, _ = calculate_match_score(observed, THREE_POINT)

        # nose error 1.0 at weight 2.0, shoulders exact at 1.8 each
        assert score == pytest.approx(round((1 - 2.0 / 5.6) * 100, 2))

    def test_no_common_labels_scores_zero(self) -> None:
        observed = Pose(left_knee=Keypoint(0.4, 0.8, 1.0))

        assert calculate_match_score(observed, THREE_POINT) == (0.0, 0)

    def test_unlisted_weight_defaults(self) -> None:
        assert weight_for(KeypointLabel.NOSE) == 2.0
        assert weight_for(KeypointLabel.NOSE, {}) == 1.0
        assert BODY_PART_WEIGHTS[KeypointLabel.LEFT_ANKLE] == 0.5


class TestAdjustments:
    def test_identical_pose_needs_no_adjustment(self) -> None:
        assert generate_adjustments(THREE_POINT, THREE_POINT) == []

    def test_nose_too_far_right(self) -> None:
        observed = THREE_POINT.with_keypoint("nose", Keypoint(0.9, 0.2, 1.0))

        (adjustment,) = generate_adjustments(observed, THREE_POINT)

        assert adjustment.label is KeypointLabel.NOSE
        assert adjustment.direction is Direction.LEFT
        assert adjustment.urgency is Urgency.HIGH
        assert adjustment.magnitude == 40

    def test_large_miss_is_urgent_regardless_of_weight(self) -> None:
        target = Pose(left_ankle=Keypoint(0.5, 0.9, 1.0))
        observed = Pose(left_ankle=Keypoint(0.5, 0.7, 1.0))

        (adjustment,) = generate_adjustments(observed, target)

        assert adjustment.weight == 0.5
        assert adjustment.direction is Direction.DOWN
        assert adjustment.urgency is Urgency.HIGH

    def test_large_miss_overrides_medium_urgency(self) -> None:
        target = Pose(left_wrist=Keypoint(0.5, 0.5, 1.0))
        observed = Pose(left_wrist=Keypoint(0.5, 0.7, 1.0))

        (adjustment,) = generate_adjustments(observed, target)

        assert adjustment.weight == 1.0
        assert adjustment.magnitude == 20
        assert adjustment.urgency is Urgency.HIGH

    def test_urgency_tiers_and_ordering(self) -> None:
        target = Pose.from_dict({
            "nose": (0.5, 0.2, 1.0),
            "left_wrist": (0.5, 0.5, 1.0),
            "left_knee": (0.5, 0.8, 1.0),
            "left_ankle": (0.5, 0.9, 1.0),
        })
        observed = Pose.from_dict({
            "nose": (0.9, 0.2, 1.0),
            "left_wrist": (0.5, 0.59, 1.0),
            "left_knee": (0.5, 0.73, 1.0),
            "left_ankle": (0.5, 0.7, 1.0),
        })

        adjustments = generate_adjustments(observed, target)

        assert [a.label for a in adjustments] == [
            KeypointLabel.NOSE,
            KeypointLabel.LEFT_ANKLE,
            KeypointLabel.LEFT_WRIST,
            KeypointLabel.LEFT_KNEE,
        ]
        assert [a.urgency for a in adjustments] == [Urgency.HIGH, Urgency.HIGH, Urgency.MEDIUM, Urgency.LOW]
        assert adjustments[2].direction is Direction.UP

    def test_small_offsets_ignored(self) -> None:
        observed = THREE_POINT.with_keypoint("nose", Keypoint(0.54, 0.2, 1.0))

        assert generate_adjustments(observed, THREE_POINT) == []

    def test_diagonal_tie_prefers_vertical(self) -> None:
        target = Pose(nose=Keypoint(0.5, 0.5, 1.0))
        observed = Pose(nose=Keypoint(0.25, 0.25, 1.0))

        (adjustment,) = generate_adjustments(observed, target)

        assert adjustment.direction is Direction.DOWN


class TestSymmetryAndDifficulty:
    def test_mirror_symmetric_pose(self) -> None:
        result = calculate_symmetry(THREE_POINT)

        assert result.score == 100
        assert result.asymmetrical_parts == ()

    def test_no_pairs_is_symmetric(self) -> None:
        assert calculate_symmetry(Pose(nose=Keypoint(0.5, 0.2, 1.0))).score == 100

    def test_asymmetric_wrists(self) -> None:
        pose = Pose(left_wrist=Keypoint(0.2, 0.5, 1.0), right_wrist=Keypoint(0.6, 0.5, 1.0))

        result = calculate_symmetry(pose)

        assert result.score == pytest.approx(60.0)
        assert result.asymmetrical_parts == ("wrist",)

    def test_one_raised_elbow_rounds_half_up(self) -> None:
        pose = Pose(left_shoulder=Keypoint(0.4, 0.4, 1.0), left_elbow=Keypoint(0.3, 0.3, 1.0))

        assert estimate_difficulty(pose).difficulty == 2

    def test_difficulty_never_exceeds_five(self) -> None:
        values = {label: Keypoint(0.1, 0.9, 1.0) for label in KeypointLabel}
        values[KeypointLabel.LEFT_ELBOW] = Keypoint(0.1, 0.1, 1.0)
        values[KeypointLabel.RIGHT_ELBOW] = Keypoint(0.1, 0.1, 1.0)

        estimate = estimate_difficulty(Pose.from_keypoints(values))

        assert estimate.difficulty == 4
        assert estimate.difficulty <= 5
        for template in BUILTIN_TEMPLATES.values():
            assert 1 <= estimate_difficulty(template.target_pose).difficulty <= 5


class TestPoseMatcher:
    def test_identical_scenario(self) -> None:
        result = PoseMatcher().match(THREE_POINT, _template(THREE_POINT))

        assert result.score >= 99
        assert result.symmetry_score == 100
        assert result.adjustments == ()
        assert result.compared_keypoints == 3
        assert result.matched_keypoints == 3

    def test_nose_scenario(self) -> None:
        observed = THREE_POINT.with_keypoint("nose", Keypoint(0.9, 0.2, 1.0))

        result = PoseMatcher().match(observed, _template(THREE_POINT))

        assert len(result.adjustments) == 1
        assert result.adjustments[0].direction is Direction.LEFT
        assert result.adjustments[0].urgency is Urgency.HIGH
        assert result.matched_keypoints == 2

    def test_find_best_template(self) -> None:
        pose = BUILTIN_TEMPLATES["portrait_dynamic"].target_pose

        best = find_best_template(pose, BUILTIN_TEMPLATES)

        assert best.template.template_id == "portrait_dynamic"
        assert best.result.score == 100

    def test_find_best_template_empty_catalog(self) -> None:
        assert find_best_template(THREE_POINT, {}) is None


class TestFraming:
    def test_unlevel_shoulders_and_high_head(self) -> None:
        pose = Pose.from_dict({
            "nose": (0.5, 0.1, 1.0),
            "left_shoulder": (0.4, 0.4, 1.0),
            "right_shoulder": (0.6, 0.5, 1.0),
        })

        issues = detect_framing_issues(pose)

        assert [issue.issue for issue in issues] == ["shoulders not level", "head too high in frame"]
        assert all(issue.severity is Urgency.HIGH for issue in issues)

    def test_sorted_by_severity(self) -> None:
        pose = Pose.from_dict({
            "nose": (0.5, 0.5, 1.0),
            "left_shoulder": (0.35, 0.4, 1.0),
            "right_shoulder": (0.65, 0.4, 1.0),
            "left_elbow": (0.3, 0.5, 1.0),
            "right_elbow": (0.7, 0.5, 1.0),
        })

        issues = detect_framing_issues(pose)

        assert [issue.severity for issue in issues] == [Urgency.MEDIUM, Urgency.LOW]
        assert issues[0].issue == "head too low in frame"

    def test_well_framed_pose(self) -> None:
        assert detect_framing_issues(BUILTIN_TEMPLATES["portrait_natural"].target_pose) == []


class TestTemplateCatalog:
    def test_builtin_catalog(self) -> None:
        assert len(BUILTIN_TEMPLATES) == 9
        assert BUILTIN_TEMPLATES["casual_sitting"].category == "casual"
        assert BUILTIN_TEMPLATES["casual_sitting"].target_pose.left_knee is not None

    def test_unknown_template(self) -> None:
        with pytest.raises(TemplateNotFoundError) as excinfo:
            get_template(BUILTIN_TEMPLATES, "missing")

        assert excinfo.value.template_id == "missing"

    def test_load_catalog_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text(
            "templates:\n"
            "  wave:\n"
            "    name: Wave\n"
            "    difficulty: 2\n"
            "    tips: [Raise one hand]\n"
            "    pose:\n"
            "      nose: {x: 0.5, y: 0.2, visibility: 1.0}\n"
            "      right_wrist: {x: 0.7, y: 0.15}\n"
        )

        catalog = load_template_catalog(path)

        template = catalog["wave"]
        assert template.name == "Wave"
        assert template.difficulty == 2
        assert template.tips == ("Raise one hand",)
        assert template.target_pose.right_wrist == Keypoint(0.7, 0.15, 0.0)

    def test_invalid_catalog(self, tmp_path: Path) -> None:
        path = tmp_path / "templates.yaml"
        path.write_text("templates:\n  bad:\n    name: Bad\n    pose:\n      nose: {x: 1.5, y: 0.2}\n")

        with pytest.raises(InvalidTemplateError):
            load_template_catalog(path)

    def test_missing_catalog_file(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidTemplateError):
            load_template_catalog(tmp_path / "absent.yaml")
