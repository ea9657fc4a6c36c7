"""Routing — compiled route table used to tell real paths from dead ends.

Routes are registered during setup and compiled into an immutable
lookup structure before the first request.
"""
