"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the OnlyTests pages.

Each page class encapsulates:
    - Element locators
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .home_page import HomePage
from .about_page import AboutPage
from .tools_page import ToolsPage
from .user_data_page import UserDataPage
from .text_generator_page import TextGeneratorPage
from .templates_page import TestCasesPage

__all__ = [
    "HomePage",
    "AboutPage",
    "ToolsPage",
    "UserDataPage",
    "TextGeneratorPage",
    "TestCasesPage",
]
