"""
================================================================================
UI Test Data
================================================================================

Random inputs for form tests and the static expectations about the site
(paths, page titles, home page sections).

================================================================================
"""

import random
import string
from types import MappingProxyType


def generate_random_string(length: int = 8) -> str:
    """Random alphanumeric string of `length` characters."""
    if length < 0:
        raise ValueError(f"length must be >= 0, got {length}")
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def generate_random_email() -> str:
    return f"test-{generate_random_string()}@example.com"


SITE_DATA = MappingProxyType({
    "urls": {
        "home": "/",
        "about": "/about",
        "tools": {
            "user_data": "/tools/user-data",
            "count_tool": "/tools/count-tool",
            "text_generator": "/tools/text-generator",
        },
        "templates": {
            "test_cases": "/templates/test-cases",
        },
        "terms": "/terms",
    },
    "titles": {
        "home": "OnlyTests - Test Data & Tools",
        "about": "About OnlyTests",
        "user_data": "User Data Generator",
        "test_cases": "Test Case Template",
    },
    "sections": ("Test Data Generation", "Utility Tools", "Templates"),
})


__all__ = [
    "generate_random_string",
    "generate_random_email",
    "SITE_DATA",
]
