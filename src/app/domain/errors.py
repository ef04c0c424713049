from __future__ import annotations


class RecipeKeeperError(Exception):
    pass


class EntityNotFoundError(RecipeKeeperError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} with id '{entity_id}' not found")
        self.entity = entity
        self.entity_id = entity_id


class IdentifierNotValidError(RecipeKeeperError):
    def __init__(self, entity: str, entity_id: str):
        super().__init__(f"{entity} id '{entity_id}' not valid")
        self.entity = entity
        self.entity_id = entity_id


class SourceTypeNotValidError(RecipeKeeperError):
    def __init__(self, source_type: str):
        super().__init__(f"source type '{source_type}' not valid")
        self.source_type = source_type


class StoreError(RecipeKeeperError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason


class StoreTimeoutError(StoreError):
    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(operation, f"timed out after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds
