"""
HTTP surface: FastAPI app and form endpoints.
"""
