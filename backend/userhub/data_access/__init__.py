"""
UserHub Backend — Data Access Layer
=====================================

What:  Owns the User entity and every storage operation on it.
Who:   Used by the business layer (through the UserRepository contract) and
       by the composition root. Never imported by the api layer.

Contents:
    - database.py:     Engine / session factories, session_scope(), Base
    - entities.py:     User ORM entity
    - repositories/:   UserRepository contract + SQL and in-memory variants
"""
