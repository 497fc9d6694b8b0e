"""
Skeleton — суставы и кости отслеживаемого скелета

Кость — отрезок между двумя суставами; её ориентация в момент времени
хранится как 3-D ColumnVector. Порядок BONES фиксирован: архивы хранят
кости позиционно в этом порядке.
"""

from enum import Enum
from typing import Final

from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class JointType(str, Enum):
    """Сустав скелета сенсора"""

    SPINE_BASE = "SpineBase"
    SPINE_MID = "SpineMid"
    NECK = "Neck"
    HEAD = "Head"
    SHOULDER_LEFT = "ShoulderLeft"
    ELBOW_LEFT = "ElbowLeft"
    WRIST_LEFT = "WristLeft"
    HAND_LEFT = "HandLeft"
    SHOULDER_RIGHT = "ShoulderRight"
    ELBOW_RIGHT = "ElbowRight"
    WRIST_RIGHT = "WristRight"
    HAND_RIGHT = "HandRight"
    HIP_LEFT = "HipLeft"
    KNEE_LEFT = "KneeLeft"
    ANKLE_LEFT = "AnkleLeft"
    FOOT_LEFT = "FootLeft"
    HIP_RIGHT = "HipRight"
    KNEE_RIGHT = "KneeRight"
    ANKLE_RIGHT = "AnkleRight"
    FOOT_RIGHT = "FootRight"
    SPINE_SHOULDER = "SpineShoulder"
    HAND_TIP_LEFT = "HandTipLeft"
    THUMB_LEFT = "ThumbLeft"
    HAND_TIP_RIGHT = "HandTipRight"
    THUMB_RIGHT = "ThumbRight"


# =============================================================================
# BONE MODEL
# =============================================================================


class Bone(BaseModel):
    """
    Кость между двумя суставами.

    В архивах to_joint записывается в атрибут "To", from_joint — в "From".
    """

    to_joint: JointType = Field(..., description="Первый сустав пары")
    from_joint: JointType = Field(..., description="Второй сустав пары")

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.from_joint.value}->{self.to_joint.value}"


def _bone(to_joint: JointType, from_joint: JointType) -> Bone:
    return Bone(to_joint=to_joint, from_joint=from_joint)


_J = JointType

BONES: Final[tuple[Bone, ...]] = (
    # Torso
    _bone(_J.HEAD, _J.NECK),
    _bone(_J.NECK, _J.SPINE_SHOULDER),
    _bone(_J.SPINE_SHOULDER, _J.SPINE_MID),
    _bone(_J.SPINE_MID, _J.SPINE_BASE),
    _bone(_J.SPINE_SHOULDER, _J.SHOULDER_RIGHT),
    _bone(_J.SPINE_SHOULDER, _J.SHOULDER_LEFT),
    _bone(_J.SPINE_BASE, _J.HIP_RIGHT),
    _bone(_J.SPINE_BASE, _J.HIP_LEFT),
    # Right Arm
    _bone(_J.SHOULDER_RIGHT, _J.ELBOW_RIGHT),
    _bone(_J.ELBOW_RIGHT, _J.WRIST_RIGHT),
    _bone(_J.WRIST_RIGHT, _J.HAND_RIGHT),
    _bone(_J.HAND_RIGHT, _J.HAND_TIP_RIGHT),
    _bone(_J.WRIST_RIGHT, _J.THUMB_RIGHT),
    # Left Arm
    _bone(_J.SHOULDER_LEFT, _J.ELBOW_LEFT),
    _bone(_J.ELBOW_LEFT, _J.WRIST_LEFT),
    _bone(_J.WRIST_LEFT, _J.HAND_LEFT),
    _bone(_J.HAND_LEFT, _J.HAND_TIP_LEFT),
    _bone(_J.WRIST_LEFT, _J.THUMB_LEFT),
    # Right Leg
    _bone(_J.HIP_RIGHT, _J.KNEE_RIGHT),
    _bone(_J.KNEE_RIGHT, _J.ANKLE_RIGHT),
    _bone(_J.ANKLE_RIGHT, _J.FOOT_RIGHT),
    # Left Leg
    _bone(_J.HIP_LEFT, _J.KNEE_LEFT),
    _bone(_J.KNEE_LEFT, _J.ANKLE_LEFT),
    _bone(_J.ANKLE_LEFT, _J.FOOT_LEFT),
)

BONE_COUNT: Final[int] = len(BONES)
