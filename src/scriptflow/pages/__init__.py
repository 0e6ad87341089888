"""NiceGUI pages for ScriptFlow.

Import this module to register all page routes with NiceGUI.
"""

from scriptflow.pages import (
    admin,
    auth,
    dashboard,
    index,
    video,
)

__all__ = ["admin", "auth", "dashboard", "index", "video"]

# These imports register @ui.page decorators as a side effect.
_PAGES = (admin, auth, dashboard, index, video)
