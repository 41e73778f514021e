from __future__ import annotations

import platform

CLIENT_LIBRARY = "gocardless-pro-python"
CLIENT_LIB_VERSION = "3.3.0"
API_VERSION = "2015-07-06"


def user_agent() -> str:
    return f"{CLIENT_LIBRARY}/{CLIENT_LIB_VERSION} python/{platform.python_version()}"
