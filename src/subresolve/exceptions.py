class SetupError(Exception):
    """A failure before or around the resolution pool that aborts the run."""


class ResolverSetupError(SetupError):
    pass


class WordlistError(SetupError):
    pass


class OutputError(SetupError):
    pass
