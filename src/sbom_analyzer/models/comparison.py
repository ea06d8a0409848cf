"""
Result of reconciling the two scanners' dependency sets.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ComparisonResult:
    """
    Common and missing dependencies across the selected repositories.

    List order follows the insertion order of the per-tool unions.
    """

    syft_total: int = 0
    owasp_total: int = 0
    common: List[str] = field(default_factory=list)
    missing_from_owasp: List[str] = field(default_factory=list)
    missing_from_syft: List[str] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        return self.missing_from_owasp + self.missing_from_syft

    def to_dict(self) -> Dict[str, Any]:
        return {
            "syftTotal": self.syft_total,
            "owaspTotal": self.owasp_total,
            "common": list(self.common),
            "missing": self.missing,
            "missingDetails": {
                "fromOwasp": list(self.missing_from_owasp),
                "fromSyft": list(self.missing_from_syft)
            }
        }
