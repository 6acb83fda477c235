"""Built-in record stages.

Every module defines a `BaseStage` subclass and exports it as `STAGE`;
`recstream.operations.registry.get_stage_registry()` collects them.
"""
