"""Core building blocks of the container installer.

- ``packages``: collect the candidate packages and order them by dependencies
- ``factories``: classify declarations, merge entries and persist the module
- ``config``: layered YAML configuration
- ``installer``: the single entry point wiring the stages together
"""
