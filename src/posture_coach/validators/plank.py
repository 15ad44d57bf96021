"""
Plank (forearm plank) validator.

Body frame, built from world landmarks:
    x: elbows midpoint → foot-indices midpoint (kept exact)
    z: left hip → right hip, made perpendicular to x
    y: z × x
    origin: hips midpoint

In a good plank every bilateral pair lines up in x/y, the shoulder→hip,
shoulder→knee and shoulder→heel lines run nearly parallel to the forearm-to-toe
line, the hips sit no higher than the knees allow, and the upper arms stand
perpendicular to it.
"""

from ..exercises import Exercise
from ..geometry import utils
from ..geometry.frame import CoordinateFrame
from ..landmarks import BILATERAL_JOINTS, Landmark, LandmarkFrame
from ..thresholds import PlankThresholds
from .base import (
    Diagnostics,
    Rule,
    Validator,
    alignment_rule,
    band_rule,
    ordering_rule,
    support_rule,
)

# Bilateral pairs checked for twist/tilt, in priority order
ALIGNED_JOINTS = ("shoulders", "hips", "knees", "heels", "elbows")


def build_body_frame(lm_xyz) -> CoordinateFrame:
    """Hip-anchored frame with x running from the elbows to the toes."""
    left_hip = utils.landmark_point(lm_xyz, Landmark.LEFT_HIP)
    right_hip = utils.landmark_point(lm_xyz, Landmark.RIGHT_HIP)
    hip_line = right_hip.subtract(left_hip)
    forearm_to_toes = utils.foot_indices_midpoint(lm_xyz).subtract(
        utils.elbows_midpoint(lm_xyz)
    )
    # x stays exact; z is the hip line made perpendicular to it, so a rotated
    # pelvis shows up as an x offset between the hips
    return CoordinateFrame(
        (hip_line, "z"),
        (forearm_to_toes, "x"),
        left_hip.midpoint(right_hip),
        keep_second=True,
    )


class PlankValidator(Validator):
    exercise = Exercise.PLANK
    required_landmarks = tuple(
        lm for joint in (*ALIGNED_JOINTS, "foot_indices") for lm in BILATERAL_JOINTS[joint]
    )

    def build_rules(self, thresholds: PlankThresholds) -> list[Rule]:
        rules = [
            alignment_rule(f"align_{joint}", self.message(f"align_{joint}"), joint, thresholds.alignment)
            for joint in ALIGNED_JOINTS
        ]
        rules += [
            band_rule("shoulder_hip", self.message("shoulder_hip"), "shoulder_hip", thresholds.shoulder_hip),
            band_rule("shoulder_knee", self.message("shoulder_knee"), "shoulder_knee", thresholds.shoulder_knee),
            ordering_rule(
                "raise_hips", self.message("raise_hips"),
                lower="shoulder_knee", upper="shoulder_hip", margin=thresholds.hip_knee_margin,
            ),
            band_rule("shoulder_heel", self.message("shoulder_heel"), "shoulder_heel", thresholds.shoulder_heel),
            ordering_rule(
                "raise_knees", self.message("raise_knees"),
                lower="shoulder_heel", upper="shoulder_knee", margin=thresholds.knee_heel_margin,
            ),
            support_rule("support", self.message("support"), "shoulder_elbow", thresholds.support_tolerance),
        ]
        return rules

    def diagnose(self, frame: LandmarkFrame) -> Diagnostics:
        lm = frame.world
        body = build_body_frame(lm)

        vectors = {
            joint: utils.bilateral_difference(lm, joint, body) for joint in ALIGNED_JOINTS
        }

        shoulders = utils.shoulders_midpoint(lm, body)
        angles = {
            "shoulder_hip": shoulders.angle(utils.hips_midpoint(lm, body)),
            "shoulder_knee": shoulders.angle(utils.knees_midpoint(lm, body)),
            "shoulder_heel": shoulders.angle(utils.heels_midpoint(lm, body)),
            "shoulder_elbow": shoulders.angle(utils.elbows_midpoint(lm, body)),
        }
        return Diagnostics(vectors=vectors, angles=angles)
