"""Pydantic models for the item-action surface called by the host pipeline."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PluginModel(BaseModel):
    """Base model for item-action requests and responses."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class BackupReference(PluginModel):
    """The backup operation an item is processed for."""

    name: str
    namespace: str
    storage_location: str = Field(default="default", alias="storageLocation")


class RestoreReference(PluginModel):
    """The restore operation an item is processed for."""

    name: str
    namespace: str
    namespace_mapping: dict[str, str] = Field(default_factory=dict, alias="namespaceMapping")


class ResourceIdentifier(PluginModel):
    """Identity of an item the host should process again."""

    group: str
    resource: str
    namespace: str | None = None
    name: str


class BackupItemRequest(PluginModel):
    """Backup item action input."""

    item: dict[str, Any]
    backup: BackupReference


class BackupItemResponse(PluginModel):
    """Backup item action output; `item` is None when the item is dropped."""

    item: dict[str, Any] | None = None
    operation_id: str = Field(default="", alias="operationId")
    items_to_update: list[ResourceIdentifier] = Field(
        default_factory=list, alias="itemsToUpdate"
    )


class RestoreItemRequest(PluginModel):
    """Restore item action input."""

    item: dict[str, Any]
    restore: RestoreReference


class RestoreItemResponse(PluginModel):
    """Restore item action output."""

    item: dict[str, Any] | None = None
    skip_restore: bool = Field(default=False, alias="skipRestore")
    operation_id: str = Field(default="", alias="operationId")


class DeleteItemRequest(PluginModel):
    """Delete item action input."""

    item: dict[str, Any]
    backup_name: str = Field(alias="backupName")


class CancelOperationRequest(PluginModel):
    """Cancel input; cancellation is accepted and ignored."""

    operation_id: str = Field(alias="operationId")


__all__ = [
    "BackupItemRequest",
    "BackupItemResponse",
    "BackupReference",
    "CancelOperationRequest",
    "DeleteItemRequest",
    "PluginModel",
    "ResourceIdentifier",
    "RestoreItemRequest",
    "RestoreItemResponse",
    "RestoreReference",
]
