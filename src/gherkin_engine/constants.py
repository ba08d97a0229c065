"""Constants for the Gherkin engine."""

# Dialect selected when a document carries no usable `# language:` directive
DEFAULT_LANGUAGE = "en"

# Doc string delimiters, tried in this order
DOC_STRING_DELIMITERS = ('"""', "```")

# Writer indentation (spaces per nesting level)
DEFAULT_INDENT = 2

# Table name under [tool] in pyproject.toml
PYPROJECT_TABLE = "gherkin-engine"
