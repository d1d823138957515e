import math
import os
from pathlib import Path

DEFAULTS = dict(
    camera=dict(
        fov=60.0, near=0.1, far=1000.0,
        zSmall=28.0, zMedium=24.0, zLarge=18.0,
        zMin=8.0, zMax=30.0,
        initRotX=math.pi - math.pi / 8,
        projectionZ=0.5,
    ),
    rings=dict(
        radii=dict(inner=4.0, middle=5.5, outer=7.0),
        points=dict(inner=3, middle=2, outer=1),
        padding=1.0,
    ),
    visuals=dict(
        defaultScale=1.0, selectedScale=1.3, dragScale=1.3,
        deselectedScale=0.5, hoverScale=1.2,
        selectedOpacity=1.0, activeOpacity=0.9, deselectedOpacity=0.3,
        glowOpacity=0.2, glowHighlightOpacity=0.4,
        bubbleRadius=0.45,
        unknownColor="#999999",
    ),
    interaction=dict(
        rotationDamping=0.95,
        rotationSensitivity=0.005,
        zoomSensitivity=0.01,
        autoRotateThreshold=0.001,
        autoRotateAmount=0.0005,
    ),
    touch=dict(
        zoomSensitivity=0.03,
        rotationSensitivity=0.008,
        tapMaxDistance=10.0,
        swipeMinDistance=50.0,
        swipeAspectRatio=1.5,
        categoryBarHeight=68.0,
        minPanelHeightRatio=0.5,
        minHeightTolerance=10.0,
        scrollBottomTolerance=5.0,
        mobilePanelOffsetY=5.0,
        mobileBreakpoint=768,
        smallBreakpoint=480,
    ),
    animation=dict(
        lerp=0.1, floatSpeed=0.0004, floatAmplitude=0.05,
        frameIntervalMs=16,
    ),
    score=dict(
        colorMin="#ef4444", colorMid="#eab308", colorMax="#22c55e",
    ),
    storage=dict(
        key="wheelOfPrivilege_selections",
        fileName="storage.json",
    ),
    system=dict(transparent=False),
)

TOOLTIPS = {
    "reset": "Move every bubble back to the inner ring and re-enable all categories.",
    "prev": "Previous identity (wraps around).",
    "next": "Next identity (wraps around).",
    "help": "Show or hide the how-to-use panel.",
    "score": "Sum of points: 3 per bubble on the inner ring, 2 on the middle ring, 1 on the outer ring.",
}

HELP_TEXT = (
    "Drag each identity bubble between the three rings to match your own position. "
    "The inner ring is the most privileged (3 points), the outer ring the least (1 point). "
    "Click a bubble to read about it; use the category buttons to dim whole categories. "
    "Your selections are saved locally and encoded in the shareable link."
)


def storage_dir() -> Path:
    """Directory holding the local selection store (``AWOP_STORAGE_DIR`` overrides)."""
    raw = os.environ.get("AWOP_STORAGE_DIR", "").strip()
    if raw:
        return Path(raw).expanduser()
    return Path.home() / ".awop"


def debug_enabled() -> bool:
    return os.environ.get("AWOP_DEBUG", "").strip().lower() in {"1", "true", "yes"}
