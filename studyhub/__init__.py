"""
StudyHub course service
Application package initialization
"""

from studyhub.config import settings, get_settings, Settings

__all__ = ["settings", "get_settings", "Settings"]
