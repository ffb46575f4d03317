"""
UserHub Backend — Request Handling Layer
==========================================

What:  HTTP routes, route dependencies and middleware.
Rule:  Imports business and shared only. Nothing under userhub.api may
       import userhub.data_access (checked by tests/test_architecture.py).
"""
