"""Webapp descriptor model."""

from __future__ import annotations

import threading
from collections.abc import Mapping
from typing import Any

from pydantic import Field, PrivateAttr, field_validator, model_validator

from .resources import Declaration, read_only

OVERRIDE_MODE_REMOVE = "remove-overridden-webapp"


def normalize_mount_point(mount_point: str) -> str:
    """Normalize a mount point to the form ``/path/*``.

    Empty mount points are left empty. Normalizing twice gives the same result.
    """
    if not mount_point:
        return mount_point
    if not mount_point.startswith("/"):
        mount_point = "/" + mount_point
    if not mount_point.endswith("/*"):
        if not mount_point.endswith("/"):
            mount_point += "/"
        mount_point += "*"
    return mount_point


def context_root_for(mount_point: str) -> str:
    """Return the context root for a normalized mount point."""
    if mount_point.endswith("/*"):
        return mount_point[:-2]
    return mount_point


class _DisplayFlag:
    """Lock-guarded boolean holding the current app-bar display state."""

    def __init__(self, value: bool):
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> bool:
        with self._lock:
            return self._value

    def set(self, value: bool) -> None:
        with self._lock:
            self._value = value


class WebappInfo(Declaration):
    """A <webapp> element: one mountable application within a component.

    The owning component is referenced by its global name only. All fields are
    frozen; the one piece of runtime state is the app-bar display flag, which
    starts from the declared ``app_bar_display`` value and can be toggled with
    :meth:`set_app_bar_display` by the hosting container.
    """

    component_name: str
    name: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    server: str = ""
    mount_point: str = Field(default="", alias="mount-point")
    location: str = ""
    privileged: bool = True
    app_bar_display: bool = Field(default=True, alias="app-bar-display")
    access_permission: str = Field(default="", alias="access-permission")
    base_permission: tuple[str, ...] = Field(default=("NONE",), alias="base-permission")
    position: str = ""
    menu_name: str = Field(default="main", alias="menu-name")
    virtual_hosts: tuple[str, ...] = Field(default=(), alias="virtual-hosts")
    init_parameters: Mapping[str, str] = Field(default_factory=dict, alias="init-params")
    override_mode: str = Field(default="", alias="override-mode")

    _display: _DisplayFlag = PrivateAttr()

    @model_validator(mode="before")
    @classmethod
    def _default_title_and_description(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        name = data.get("name") or ""
        if not data.get("title") and name:
            # first letter upper-cased, the rest lower-cased
            data["title"] = name[0].upper() + name[1:].lower()
        if not data.get("description"):
            data["description"] = data.get("title", "")
        return data

    @field_validator("mount_point", mode="before")
    @classmethod
    def _normalize_mount_point(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_mount_point(value)
        return value

    @field_validator("location", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in ("", "/") and value.endswith("/"):
            return value[:-1]
        return value

    @field_validator("privileged", "app_bar_display", mode="before")
    @classmethod
    def _true_unless_false(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value != "false"
        return value

    @field_validator("base_permission", mode="before")
    @classmethod
    def _parse_base_permission(cls, value: Any) -> Any:
        if isinstance(value, str):
            if not value:
                return ("NONE",)
            value = value.split(",")
        permissions = []
        for permission in value:
            permission = permission.strip()
            if "_" in permission:
                permission = permission[: permission.index("_")]
            permissions.append(permission)
        return tuple(permissions)

    @field_validator("init_parameters")
    @classmethod
    def _freeze_init_parameters(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return read_only(value)

    @field_validator("menu_name", mode="before")
    @classmethod
    def _default_menu_name(cls, value: Any) -> Any:
        return value or "main"

    def model_post_init(self, __context: Any) -> None:
        self._display = _DisplayFlag(self.app_bar_display)

    @property
    def context_root(self) -> str:
        """Mount point without the trailing ``/*``."""
        return context_root_for(self.mount_point)

    @property
    def has_location(self) -> bool:
        return bool(self.location)

    def get_app_bar_display(self) -> bool:
        return self._display.get()

    def set_app_bar_display(self, value: bool) -> None:
        self._display.set(value)

    def retarget(self, component_name: str) -> WebappInfo:
        """Return a copy of this webapp owned by another component record."""
        copy = self.model_copy(update={"component_name": component_name})
        copy._display = _DisplayFlag(self.get_app_bar_display())
        return copy

    def __str__(self) -> str:
        return (
            f"[webappName={self.name}, componentName={self.component_name}, "
            f"contextRoot={self.context_root}, server={self.server}]"
        )
