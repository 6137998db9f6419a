class EvoDriveError(Exception):
    """Base for all evodrive exceptions."""

    pass


class DimensionMismatch(EvoDriveError, ValueError):
    """Two matrices have incompatible shapes for the requested operation."""

    pass


class InvalidTopology(EvoDriveError, ValueError):
    """A network shape cannot be built (no hidden layer, wrong activation count, ...)."""

    pass


class InputSizeMismatch(EvoDriveError, ValueError):
    """A network was run with the wrong number of inputs."""

    pass


class ConfigurationError(EvoDriveError):
    """A configuration value is missing, unparseable or inconsistent."""

    pass


class MissingGenomeSource(EvoDriveError):
    """A network was to be deserialized but there is no encoding to read."""

    pass


class NoActiveGenome(EvoDriveError):
    """The controller was told a genome died while none is being evaluated."""

    pass
