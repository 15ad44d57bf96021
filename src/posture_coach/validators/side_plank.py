"""
Side plank validator.

The grounded side is decided first, from pixel geometry
(:func:`posture_coach.geometry.image_plane.detect_grounded_side`). The body
frame is then built from that side's world landmarks:
    x: grounded elbow → grounded heel
    y: grounded shoulder → grounded elbow
    z: x × y
    origin: hips midpoint

Only the grounded arm's support angle is checked.
"""

from ..exercises import Exercise
from ..geometry import utils
from ..geometry.frame import CoordinateFrame
from ..geometry.image_plane import detect_grounded_side
from ..landmarks import BILATERAL_JOINTS, LandmarkFrame, Side
from ..thresholds import SidePlankThresholds
from .base import (
    Diagnostics,
    Rule,
    Validator,
    alignment_rule,
    band_rule,
    ordering_rule,
    spread_rule,
    support_rule,
)

ALIGNED_JOINTS = ("hips", "knees", "heels")


def build_body_frame(lm_xyz, side: Side) -> CoordinateFrame:
    """Hip-anchored frame spanned by the grounded forearm-to-heel line and upper arm."""
    elbow = utils.landmark_point(lm_xyz, side.landmark("elbow"))
    heel = utils.landmark_point(lm_xyz, side.landmark("heel"))
    shoulder = utils.landmark_point(lm_xyz, side.landmark("shoulder"))
    return CoordinateFrame(
        (heel.subtract(elbow), "x"),
        (elbow.subtract(shoulder), "y"),
        utils.hips_midpoint(lm_xyz),
    )


class SidePlankValidator(Validator):
    exercise = Exercise.SIDE_PLANK
    required_landmarks = tuple(
        lm for joint in ("shoulders", "elbows", *ALIGNED_JOINTS) for lm in BILATERAL_JOINTS[joint]
    )

    def build_rules(self, thresholds: SidePlankThresholds) -> list[Rule]:
        rules = [
            alignment_rule(f"align_{joint}", self.message(f"align_{joint}"), joint, thresholds.alignment)
            for joint in ALIGNED_JOINTS
        ]
        rules += [
            support_rule("support", self.message("support"), "support", thresholds.support_tolerance),
            band_rule("shoulder_hip", self.message("shoulder_hip"), "shoulder_hip", thresholds.shoulder_hip),
            band_rule("shoulder_knee", self.message("shoulder_knee"), "shoulder_knee", thresholds.shoulder_knee),
            ordering_rule(
                "lower_knees", self.message("lower_knees"),
                lower="shoulder_knee", upper="shoulder_hip", margin=thresholds.knee_below_hip_margin,
            ),
            ordering_rule(
                "knees_to_hips", self.message("knees_to_hips"),
                lower="shoulder_hip", upper="shoulder_knee", margin=thresholds.knee_above_hip_margin,
            ),
            band_rule("shoulder_heel", self.message("shoulder_heel"), "shoulder_heel", thresholds.shoulder_heel),
            spread_rule(
                "hips_to_heels", self.message("hips_to_heels"),
                "shoulder_hip", "shoulder_heel", thresholds.hip_heel_margin,
            ),
        ]
        return rules

    def diagnose(self, frame: LandmarkFrame) -> Diagnostics:
        side = detect_grounded_side(frame)
        lm = frame.world
        body = build_body_frame(lm, side)

        vectors = {
            joint: utils.bilateral_difference(lm, joint, body) for joint in ALIGNED_JOINTS
        }

        shoulders = utils.shoulders_midpoint(lm, body)
        grounded_shoulder = utils.landmark_point(lm, side.landmark("shoulder"), body)
        grounded_elbow = utils.landmark_point(lm, side.landmark("elbow"), body)
        angles = {
            "shoulder_hip": shoulders.angle(utils.hips_midpoint(lm, body)),
            "shoulder_knee": shoulders.angle(utils.knees_midpoint(lm, body)),
            "shoulder_heel": shoulders.angle(utils.heels_midpoint(lm, body)),
            "shoulder_elbow": shoulders.angle(utils.elbows_midpoint(lm, body)),
            "support": grounded_shoulder.angle(grounded_elbow, absolute=True),
        }
        return Diagnostics(vectors=vectors, angles=angles)
