"""
artifact_dao package initializer

Keep this module lightweight. Do not import the FastAPI app or the
engine singleton here, so the runtime can be used without the HTTP stack.
"""

__all__ = []
