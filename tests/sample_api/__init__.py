"""Small FastAPI application documented by the routedoc tests."""
