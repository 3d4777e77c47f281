"""Data models for accessibility findings and issues."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Severity(Enum):
    """Issue severity levels."""
    CRITICAL = "critical"   # WCAG A blocker
    SERIOUS = "serious"     # WCAG A/AA
    MODERATE = "moderate"   # Usability impact
    MINOR = "minor"         # Best practice

    @classmethod
    def values(cls) -> list:
        return [s.value for s in cls]


@dataclass
class BoundingBox:
    """Pixel rectangle of an element in the full-page screenshot."""
    x: float
    y: float
    width: float
    height: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass
class Finding:
    """Raw audit result, before normalization into an Issue."""
    id: str
    title: str
    description: str = ""
    score: Optional[float] = None        # 0..1, None when the audit gave no score
    display_value: Optional[str] = None
    impact: Optional[str] = None         # axe impact level
    selector: Optional[str] = None
    source: str = "lighthouse"           # lighthouse, axe

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "score": self.score,
            "displayValue": self.display_value,
            "impact": self.impact,
            "selector": self.selector,
            "source": self.source,
        }


@dataclass
class Issue:
    """A normalized accessibility problem, optionally mapped to source."""
    id: str
    component: str
    severity: str  # Severity value
    description: str
    file_path: Optional[str] = None
    wcag_criteria: Optional[str] = None
    current_code: Optional[str] = None
    fixed_code: Optional[str] = None
    line: Optional[int] = None
    bounding_box: Optional[BoundingBox] = None
    source_ready: bool = False

    @property
    def is_source_mapped(self) -> bool:
        """True when the issue carries a file path and both snippets."""
        return bool(self.file_path and self.current_code and self.fixed_code)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "component": self.component,
            "severity": self.severity,
            "description": self.description,
            "sourceReady": self.source_ready,
        }
        optional = {
            "filePath": self.file_path,
            "wcagCriteria": self.wcag_criteria,
            "currentCode": self.current_code,
            "fixedCode": self.fixed_code,
            "line": self.line,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        if self.bounding_box is not None:
            data["boundingBox"] = self.bounding_box.to_dict()
        return data
