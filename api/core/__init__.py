"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks the resource endpoints sit on
(DB wiring, settings, request middleware). Resource SQL and HTTP mapping live
in `resources/`.
"""
