"""Errors raised while configuring or allocating a grid."""


class ConfigurationError(ValueError):
  """Region, increment or mode settings that cannot describe a grid."""


class GridOverflowError(ConfigurationError):
  """Cell count does not fit the platform size type."""


class GridAllocationError(MemoryError):
  """Dense grid storage could not be allocated."""
