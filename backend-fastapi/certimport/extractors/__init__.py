# backend-fastapi/certimport/extractors/__init__.py
