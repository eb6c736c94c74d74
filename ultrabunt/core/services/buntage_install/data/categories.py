"""
L0 Data — Category table.

Display order of the main menu.  Pure data, no logic.
"""

from __future__ import annotations

CATEGORIES: list[tuple[str, str]] = [
    ("core", "Core Utilities"),
    ("dev", "Development Tools"),
    ("languages", "Programming Languages"),
    ("ai", "AI & LLM Tools"),
    ("containers", "Containers & Orchestration"),
    ("web", "Web Stack"),
    ("databases", "Databases"),
    ("shell", "Shells & Customization"),
    ("editors", "Editors & IDEs"),
    ("terminals", "Terminals"),
    ("browsers", "Web Browsers"),
    ("monitoring", "System Monitoring"),
    ("security", "Security Tools"),
    ("system", "System Tools"),
    ("networking", "Networking"),
    ("office", "Office & Productivity"),
    ("communication", "Communication"),
    ("multimedia", "Multimedia"),
    ("graphics", "Graphics & Design"),
    ("cloud", "Cloud & Sync"),
    ("gaming", "Gaming"),
    ("virtualization", "Virtualization"),
    ("fonts", "Fonts"),
    ("education", "Education"),
    ("science", "Science & Math"),
]
