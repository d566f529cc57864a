"""Exceptions raised by the component registry."""


class ComponentError(Exception):
    """Base class for component registry errors."""


class ComponentNotFoundError(ComponentError):
    """No component is registered under the requested name or location."""


class ResourceLoaderNotFoundError(ComponentError):
    """A component does not declare the requested resource-loader."""


class DescriptorError(ComponentError):
    """A component descriptor is missing, unreadable or invalid."""


class ResourceNotFoundError(ComponentError):
    """A resource-loader could not locate the requested resource."""


class EnvironmentMissingError(ComponentError, ValueError):
    """A resource-loader references an unset environment property."""


class RegistryStateError(ComponentError):
    """The registry was queried in a lifecycle state that does not allow it."""
