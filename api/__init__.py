"""HTTP layer (FastAPI) over :mod:`tsfclub`; run with ``uvicorn api.main:app``."""
