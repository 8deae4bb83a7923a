"""Routing — route table, segment matching, and fallback dispatch.

Routes are appended during setup and scanned in registration order on
every request. There is no compiled index; tables are expected to be
small.
"""
