"""
Configuration for the cutlist intake engine.

All tunable constants are centralized here. Override by creating a Config
instance with custom values and passing it as ``settings=`` to a component.

Usage:
    from cutlist_intake.config import Config, default_config

    # Use defaults
    print(default_config.dimension_tolerance_mm)  # 2.0

    # Override for a test run
    strict = Config(match_acceptance_threshold=0.7)
    matcher = PartMatcher(settings=strict)
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Capabilities:
    """Operation capabilities enabled for a shop.

    Shorthand tokens for a disabled capability are still consumed by the
    grammar, but the operation is not attached to the part.
    """

    edging: bool = True
    grooves: bool = True
    holes: bool = True
    cnc: bool = True

    @classmethod
    def all_enabled(cls) -> "Capabilities":
        return cls(edging=True, grooves=True, holes=True, cnc=True)

    @classmethod
    def none_enabled(cls) -> "Capabilities":
        return cls(edging=False, grooves=False, holes=False, cnc=False)


@dataclass
class ShorthandConfig:
    """
    Per-call defaults for the shorthand grammar.

    Attributes:
        material_id: Material assigned to every parsed part
        thickness_mm: Board thickness assigned to every parsed part
        edgeband_id: Edgeband reference used for edging ops
        capabilities: Which operations may be attached
    """

    material_id: str = "MAT-WHITE-18"
    thickness_mm: float = 18.0
    edgeband_id: Optional[str] = "EB-WHITE-0.8"
    capabilities: Capabilities = field(default_factory=Capabilities)


@dataclass
class Config:
    """
    Central configuration for parsing, scoring and accuracy tracking.

    All settings have defaults matching production behavior.
    Create a new instance to override any setting.
    """

    # === Shorthand grammar ===
    min_quantity: int = 1
    max_quantity: int = 9999
    default_hole_pattern: str = "SYS32"
    default_hole_face: str = "front"
    default_groove_offset_mm: float = 10.0
    default_groove_width_mm: float = 4.0
    default_groove_depth_mm: float = 10.0

    # === Field confidence ===
    max_panel_dimension_mm: float = 3000.0  # Larger than any stock sheet
    high_confidence_threshold: float = 0.85
    medium_confidence_threshold: float = 0.5
    review_threshold: float = 0.65           # Below this, ask a human to double-check

    # === Part matching ===
    dimension_tolerance_mm: float = 2.0      # Full credit / no difference
    partial_dimension_tolerance_mm: float = 10.0
    dimension_weight: float = 0.5
    partial_dimension_weight: float = 0.3
    quantity_weight: float = 0.3
    label_weight: float = 0.2
    match_acceptance_threshold: float = 0.5  # Score must exceed this
    label_match_threshold: float = 0.8       # Label similarity must exceed this

    # === Aggregation ===
    trend_deadband: float = 0.03
    weak_field_threshold: float = 0.90
    low_accuracy_threshold: float = 0.7      # Extra suggestions below this

    # === Sample publishing ===
    publisher_max_workers: int = 2


# Default configuration instance
default_config = Config()
