#!/usr/bin/env python3
"""Start the Mashup Maker API server."""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "mashup_maker.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["mashup_maker"],
    )
