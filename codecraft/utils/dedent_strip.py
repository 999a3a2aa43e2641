import textwrap

def dedent_strip(text: str) -> str:
    """
    Remove the common indentation of a multi-line string and trim surrounding whitespace.

    Usage
    -----
    >>> expected = dedent_strip(\"""
    ...     Task;Duration
    ...     A;60
    ... \""")
    """
    return textwrap.dedent(text).strip()
