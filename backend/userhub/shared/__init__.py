"""
UserHub Backend — Shared Layer
================================

What:  Data shapes and rules every other layer agrees on.
How:   Pure Python + Pydantic; imports nothing from api, business or data_access.

Contents:
    - dtos.py:        Transfer shapes (UserDto, UserCreate, UserUpdate, ...)
    - identifiers.py: Identifier parsing (malformed → InvalidIdentifierError)
    - exceptions.py:  Error hierarchy shared by all layers
"""
