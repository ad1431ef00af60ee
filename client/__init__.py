"""client/ -- Client-side session handling for TaskFlow.

Talks to the backend over HTTP only.

Layer rule: client/ imports only stdlib + third-party libraries and core/.
It does NOT import from api/ or auth/ -- the server's token validator is not
available here, and nothing in this package may make an authorization
decision.
"""
