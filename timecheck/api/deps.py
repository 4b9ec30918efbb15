"""
API Dependencies
"""
from fastapi import Request

from timecheck.core.config import Settings


def get_settings(request: Request) -> Settings:
    """Settings the running application was created with"""
    return request.app.state.settings
