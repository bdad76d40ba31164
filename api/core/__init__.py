"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB session
wrapper, settings, logging, HTTP plumbing). Feature-specific SQL lives in
the feature package (e.g. `patients/`).
"""
