"""A minimal greeting, useful for checking that the command line works."""


def hello_world() -> str:
    """Return the greeting."""
    return "hello world!"