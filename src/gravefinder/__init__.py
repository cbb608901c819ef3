"""Gravefinder - bilingual burial-plot search query interpretation and ranking.

Turns loosely structured English/Filipino queries ("hanap si Juan dela Cruz",
"can you find jiro about 20 years old") into a structured search context and
ranks candidate burial records against it.
"""

__version__ = "0.1.0"


# Lazy imports keep `import gravefinder` cheap for the CLI
def __getattr__(name: str):
    if name == "interpret_and_rank":
        from gravefinder.engine import interpret_and_rank
        return interpret_and_rank
    if name == "parse_query":
        from gravefinder.interpret import parse_query
        return parse_query
    if name == "models":
        from gravefinder import models
        return models
    if name == "store":
        from gravefinder import store
        return store
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
