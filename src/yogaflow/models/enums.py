"""Enumerations used throughout yogaflow."""

from enum import StrEnum


class Difficulty(StrEnum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class Style(StrEnum):
    VINYASA = "vinyasa"
    HATHA = "hatha"
    YIN = "yin"
    POWER = "power"
    RESTORATIVE = "restorative"


class Focus(StrEnum):
    FULL_BODY = "full body"
    UPPER_BODY = "upper body"
    LOWER_BODY = "lower body"
    CORE = "core"
    BALANCE = "balance"
    FLEXIBILITY = "flexibility"


class Side(StrEnum):
    LEFT = "left"
    RIGHT = "right"
    BOTH = "both"


class SideOption(StrEnum):
    NONE = "none"
    LEFT_RIGHT = "left_right"
    BOTH = "both"


class PoseCategory(StrEnum):
    STANDING = "standing"
    SEATED = "seated"
    SUPINE = "supine"
    PRONE = "prone"
    ARM_BALANCE = "arm_balance"
    INVERSION = "inversion"
    BALANCE = "balance"
    FORWARD_BEND = "forward_bend"
    BACKBEND = "backbend"
    TWIST = "twist"
    SIDE_BEND = "side_bend"
    UNCATEGORIZED = "uncategorized"


class UnmatchedPosePolicy(StrEnum):
    """What to do when a suggested pose name matches nothing in the catalog."""

    FIRST_IN_CATALOG = "first_in_catalog"
    SKIP = "skip"
    RAISE = "raise"
