# backend-fastapi/certimport/formats/__init__.py
