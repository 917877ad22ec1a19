"""
================================================================================
webkeywords
================================================================================

Keyword-style browser test automation: thin domain keywords on top of a
polling wait engine, element acquisition, whole-action retry and a
Hard/Soft/Silent action execution model.

Packages:
    - common: Logging setup and small shared helpers
    - framework: Wait, acquisition, retry and execution core
    - keywords: Domain keywords and the Keywords facade

Author: Automation Team
License: MIT
================================================================================
"""

__version__ = "1.0.0"
