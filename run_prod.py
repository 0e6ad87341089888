#!/usr/bin/env python
"""Production server: no hot reload, INFO-level console logging."""

import os

os.environ["SCRIPTFLOW_RELOAD"] = "0"

from scriptflow import main  # noqa: E402

if __name__ in {"__main__", "__mp_main__"}:
    main()
