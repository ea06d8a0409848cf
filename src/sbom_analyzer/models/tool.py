"""
The two simulated dependency scanners and their per-repository overrides.
"""

from enum import Enum
from typing import Dict, List


# Extra package names each scanner "finds" for a few well-known repositories
_OVERRIDE_PACKAGES: Dict[str, Dict[str, List[str]]] = {
    "expressjs/express": {
        "syft": ["express", "body-parser", "cookie-parser", "debug", "morgan", "cors", "helmet"],
        "owasp": ["express", "body-parser", "cookie-parser", "debug", "cors", "helmet",
                  "serve-favicon", "method-override"],
    },
    "pallets/flask": {
        "syft": ["flask", "werkzeug", "jinja2", "itsdangerous", "click", "markupsafe"],
        "owasp": ["flask", "werkzeug", "jinja2", "itsdangerous", "click", "markupsafe", "blinker"],
    },
    "spring-projects/spring-boot": {
        "syft": ["spring-boot", "spring-core", "spring-web", "spring-context", "jackson", "tomcat"],
        "owasp": ["spring-boot", "spring-core", "spring-web", "spring-context", "jackson", "tomcat",
                  "slf4j", "validation-api"],
    },
    "rails/rails": {
        "syft": ["rails", "activerecord", "actionpack", "activesupport", "railties", "rack"],
        "owasp": ["rails", "activerecord", "actionpack", "activesupport", "railties", "rack",
                  "sprockets"],
    },
    "vuejs/vue": {
        "syft": ["vue", "vue-router", "vuex", "compiler-sfc", "reactivity", "shared"],
        "owasp": ["vue", "vue-router", "vuex", "compiler-sfc", "reactivity", "shared", "test-utils"],
    },
}


class ScannerTool(Enum):
    """Simulated SBOM scanners."""
    SYFT = "syft"
    OWASP = "owasp"

    @property
    def vendor(self) -> str:
        return "Anchore" if self is ScannerTool.SYFT else "OWASP"

    @property
    def version(self) -> str:
        return "0.85.0" if self is ScannerTool.SYFT else "8.3.1"

    @property
    def display_name(self) -> str:
        return "Syft" if self is ScannerTool.SYFT else "OWASP"

    def override_packages(self, full_name: str) -> List[str]:
        """Package names this scanner always reports for the given repository."""
        return list(_OVERRIDE_PACKAGES.get(full_name, {}).get(self.value, []))

    @classmethod
    def parse(cls, value) -> 'ScannerTool':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(f"Unknown scanner tool: {value}. Valid tools: {[t.value for t in cls]}")


class ToolStatus(Enum):
    """Lifecycle of a scanner run as shown to the user."""
    PENDING = "Pending"
    READY = "Ready"
    SCANNING = "Scanning"
    SUCCESS = "Success"
