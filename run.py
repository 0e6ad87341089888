#!/usr/bin/env python
"""Development server with hot reload support."""

import logging

from scriptflow import main

if __name__ in {"__main__", "__mp_main__"}:
    # DEBUG to console while developing
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
    )
    logging.getLogger("watchfiles").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncpg").setLevel(logging.INFO)
    main()
